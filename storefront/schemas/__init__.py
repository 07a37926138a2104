"""
Schemas package
"""
from storefront.schemas.common import RequestModel, MessageResponse
from storefront.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
    RoleUpdate,
    TokenIdentity,
    UserProfile,
    AuthResponse,
    ProfileResponse,
    UserListResponse
)
from storefront.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    CategoryResponse,
    CategoryListResponse
)
from storefront.schemas.cart import (
    CartItemAdd,
    CartQuantityUpdate,
    GuestCartLine,
    CartReconcileRequest,
    CartLineResponse,
    CartResponse
)
from storefront.schemas.order import (
    OrderItemRequest,
    CustomerInfo,
    OrderCreate,
    OrderStatusUpdate,
    OrderItemResponse,
    OrderResponse,
    DroppedItem,
    OrderPlacementResponse,
    OrderSummaryResponse,
    OrderHistoryResponse,
    OrderListResponse
)
from storefront.schemas.admin import (
    ConfigEntry,
    ConfigResponse,
    ConfigUpdate,
    ThemeCreate,
    ThemeUpdate,
    ThemeResponse,
    ThemeListResponse
)

__all__ = [
    "RequestModel",
    "MessageResponse",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "PasswordChange",
    "RoleUpdate",
    "TokenIdentity",
    "UserProfile",
    "AuthResponse",
    "ProfileResponse",
    "UserListResponse",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",
    "CategoryResponse",
    "CategoryListResponse",
    "CartItemAdd",
    "CartQuantityUpdate",
    "GuestCartLine",
    "CartReconcileRequest",
    "CartLineResponse",
    "CartResponse",
    "OrderItemRequest",
    "CustomerInfo",
    "OrderCreate",
    "OrderStatusUpdate",
    "OrderItemResponse",
    "OrderResponse",
    "DroppedItem",
    "OrderPlacementResponse",
    "OrderSummaryResponse",
    "OrderHistoryResponse",
    "OrderListResponse",
    "ConfigEntry",
    "ConfigResponse",
    "ConfigUpdate",
    "ThemeCreate",
    "ThemeUpdate",
    "ThemeResponse",
    "ThemeListResponse"
]
