"""
Shared FastAPI dependencies: service factories and bearer-token identity
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from storefront.database import get_db
from storefront.exceptions import AuthError, AuthorizationError
from storefront.logger import get_logger
from storefront.publishers.event_publisher import EventPublisher
from storefront.schemas.auth import TokenIdentity
from storefront.security import decode_token
from storefront.services.admin_service import AdminService
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_event_publisher() -> EventPublisher:
    """Dependency to get EventPublisher instance"""
    return EventPublisher()


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get AuthService instance"""
    return AuthService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency to get CatalogService instance"""
    return CatalogService(db)


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    """Dependency to get CartService instance"""
    return CartService(db)


def get_order_service(
    db: Session = Depends(get_db),
    publisher: EventPublisher = Depends(get_event_publisher)
) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db, event_publisher=publisher)


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency to get AdminService instance"""
    return AdminService(db)


def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[TokenIdentity]:
    """
    Identity of the caller if a valid bearer token was sent

    An expired or invalid token is ignored and the caller is treated as a guest.
    """
    if credentials is None:
        return None
    try:
        return decode_token(credentials.credentials)
    except AuthError as e:
        logger.info(f"Ignoring bearer token on optional-auth route: {e.message}")
        return None


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> TokenIdentity:
    """Identity of the caller; the route requires a valid bearer token"""
    if credentials is None:
        raise AuthError("Access token required")
    return decode_token(credentials.credentials)


def require_admin(identity: TokenIdentity = Depends(get_current_identity)) -> TokenIdentity:
    """
    Identity of an admin caller

    The role is read from the token, so a role change applies at next login.
    """
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")
    return identity
