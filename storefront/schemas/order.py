"""
Pydantic schemas for request/response validation
"""
from pydantic import BaseModel, Field, EmailStr, ConfigDict
from typing import Optional, Literal, List, Union
from datetime import datetime

from storefront.schemas.common import RequestModel


OrderStatus = Literal["pending", "completed", "cancelled"]


class OrderItemRequest(RequestModel):
    """Requested line; any client-side price is ignored"""
    id: Union[int, str] = Field(..., description="Product ID or slug")
    quantity: int = Field(..., gt=0, description="Requested quantity")


class CustomerInfo(RequestModel):
    """Customer contact info, both fields required"""
    email: EmailStr = Field(..., description="Customer email address")
    username: str = Field(..., min_length=1, max_length=50, description="In-game username")

    model_config = ConfigDict(str_strip_whitespace=True)


class OrderCreate(RequestModel):
    """Schema for placing an order"""
    items: List[OrderItemRequest] = Field(default_factory=list)
    customer_info: CustomerInfo
    payment_method: Optional[str] = Field(None, max_length=50)


class OrderStatusUpdate(BaseModel):
    """Schema for updating order status"""
    status: OrderStatus = Field(..., description="Order status")


class OrderItemResponse(BaseModel):
    """Schema for order line response"""
    id: int
    product_id: int
    product_name: str
    unit_price: float
    quantity: int
    total_price: float
    delivered: bool

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Schema for order response"""
    id: int
    order_number: str
    user_id: Optional[int]
    status: str
    payment_status: str
    payment_method: Optional[str]
    delivery_status: str
    subtotal: float
    total_amount: float
    currency: str
    customer_email: str
    customer_game_username: str
    created_at: datetime
    delivered_at: Optional[datetime] = None
    items: List[OrderItemResponse]

    model_config = ConfigDict(from_attributes=True)


class DroppedItem(BaseModel):
    """Requested line left out of an order, and why"""
    index: int
    product: Union[int, str]
    reason: Literal["not_found", "inactive", "out_of_stock"]


class OrderPlacementResponse(BaseModel):
    """Result of placing an order"""
    success: bool = True
    order: OrderResponse
    dropped_items: List[DroppedItem] = []
    estimated_delivery: datetime
    message: str


class OrderSummaryResponse(BaseModel):
    """Order history entry"""
    id: int
    order_number: str
    total_amount: float
    status: str
    payment_status: str
    delivery_status: str
    items_summary: str
    created_at: datetime


class OrderHistoryResponse(BaseModel):
    """Schema for the caller's order history"""
    orders: List[OrderSummaryResponse]


class OrderListResponse(BaseModel):
    """Schema for list of orders response"""
    orders: List[OrderResponse]
    total: int

