"""
Order history API endpoints
"""
from fastapi import APIRouter, Depends

from storefront.api.deps import get_order_service, get_current_identity
from storefront.schemas.auth import TokenIdentity
from storefront.schemas.order import OrderResponse, OrderHistoryResponse
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=OrderHistoryResponse, summary="Get my orders")
def get_my_orders(
    identity: TokenIdentity = Depends(get_current_identity),
    service: OrderService = Depends(get_order_service)
):
    """Orders of the caller, newest first, with an items summary"""
    return service.get_user_orders(identity.id)


@router.get("/{order_id}", response_model=OrderResponse, summary="Get order by ID")
def get_order(
    order_id: int,
    identity: TokenIdentity = Depends(get_current_identity),
    service: OrderService = Depends(get_order_service)
):
    """
    Retrieve a specific order

    - **order_id**: Order ID; only the owner or an admin can see it
    """
    return service.get_order(order_id, identity)
