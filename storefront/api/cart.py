"""
Cart API endpoints
"""
from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service, get_current_identity
from storefront.schemas.auth import TokenIdentity
from storefront.schemas.cart import CartItemAdd, CartQuantityUpdate, CartReconcileRequest, CartResponse
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse, summary="Get cart")
def get_cart(
    identity: TokenIdentity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    return service.get_cart(identity.id)


@router.post("", response_model=CartResponse, summary="Add item to cart")
def add_item(
    data: CartItemAdd,
    identity: TokenIdentity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    """
    Add a product; the line is capped at the product's per-order maximum

    - **productId**: Product ID or slug
    - **quantity**: Quantity to add (default 1)
    """
    return service.add_item(identity.id, data.product_id, data.quantity)


@router.post("/reconcile", response_model=CartResponse, summary="Reconcile guest cart")
def reconcile(
    data: CartReconcileRequest,
    identity: TokenIdentity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    """Apply the configured login policy (replace or merge) to a guest cart"""
    return service.reconcile(identity.id, data.items)


@router.put("/{product_ref}", response_model=CartResponse, summary="Set item quantity")
def set_quantity(
    product_ref: str,
    data: CartQuantityUpdate,
    identity: TokenIdentity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    """Set a line's quantity; zero removes it"""
    return service.set_quantity(identity.id, product_ref, data.quantity)


@router.delete("/{product_ref}", response_model=CartResponse, summary="Remove item")
def remove_item(
    product_ref: str,
    identity: TokenIdentity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    return service.remove_item(identity.id, product_ref)


@router.delete("", response_model=CartResponse, summary="Clear cart")
def clear_cart(
    identity: TokenIdentity = Depends(get_current_identity),
    service: CartService = Depends(get_cart_service)
):
    return service.clear(identity.id)
