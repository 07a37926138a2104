"""
Auth API endpoints
"""
from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_auth_service, get_current_identity
from storefront.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
    TokenIdentity,
    AuthResponse,
    ProfileResponse
)
from storefront.schemas.common import MessageResponse
from storefront.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, summary="Register")
def register(
    data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """
    Create an account and return a bearer token

    - **username**: 3-50 characters, unique
    - **email**: unique
    - **password**: at least 6 characters
    - **gameUsername**: optional in-game name
    """
    return service.register(data)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Log in with username or email"""
    return service.login(data)


@router.get("/me", response_model=ProfileResponse, summary="Current user profile")
def me(
    identity: TokenIdentity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service)
):
    return service.get_profile(identity.id)


@router.put("/profile", response_model=ProfileResponse, summary="Update profile")
def update_profile(
    data: ProfileUpdate,
    identity: TokenIdentity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service)
):
    return service.update_profile(identity.id, data)


@router.put("/password", response_model=MessageResponse, summary="Change password")
def change_password(
    data: PasswordChange,
    identity: TokenIdentity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service)
):
    return service.change_password(identity.id, data)
