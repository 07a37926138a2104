"""
Repositories package
"""
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.product_repository import ProductRepository, CategoryRepository
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository, ProcessedEventRepository
from storefront.repositories.settings_repository import ThemeRepository, ServerConfigRepository

__all__ = [
    "UserRepository",
    "ProductRepository",
    "CategoryRepository",
    "CartRepository",
    "OrderRepository",
    "ProcessedEventRepository",
    "ThemeRepository",
    "ServerConfigRepository"
]
