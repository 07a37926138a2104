"""
Pydantic schemas for the persisted cart
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Union

from storefront.schemas.common import RequestModel


class CartItemAdd(RequestModel):
    """Schema for adding a product to the cart"""
    product_id: Union[int, str] = Field(..., description="Product ID or slug")
    quantity: int = Field(1, gt=0, description="Quantity to add; clamped to the product's cap")


class CartQuantityUpdate(RequestModel):
    """Schema for setting a line's quantity; zero or less removes the line"""
    quantity: int


class GuestCartLine(RequestModel):
    """Line of a client-persisted guest cart"""
    id: Union[int, str] = Field(..., description="Product ID or slug")
    quantity: int = Field(..., gt=0)


class CartReconcileRequest(RequestModel):
    """Guest cart submitted when a guest authenticates"""
    items: List[GuestCartLine] = Field(default_factory=list)


class CartLineResponse(BaseModel):
    """Schema for one cart line"""
    id: int
    slug: str
    name: str
    price: float
    quantity: int
    max_quantity: int
    image: Optional[str] = None


class CartResponse(BaseModel):
    """Schema for the caller's cart"""
    cart_items: List[CartLineResponse]
    item_count: int
    total: float
