"""
Models package
"""
from storefront.models.user import User
from storefront.models.catalog import Category, Product, ProductImage, ProductFeature
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem, ProcessedEvent
from storefront.models.settings import Theme, ServerConfig

__all__ = [
    "User",
    "Category",
    "Product",
    "ProductImage",
    "ProductFeature",
    "CartItem",
    "Order",
    "OrderItem",
    "ProcessedEvent",
    "Theme",
    "ServerConfig"
]
