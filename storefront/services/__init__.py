"""
Services package
"""
from storefront.services.auth_service import AuthService
from storefront.services.catalog_service import CatalogService
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.services.admin_service import AdminService
from storefront.services.delivery_service import DeliveryService

__all__ = [
    "AuthService",
    "CatalogService",
    "CartService",
    "OrderService",
    "AdminService",
    "DeliveryService"
]
