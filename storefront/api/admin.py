"""
Admin API endpoints

Every route requires a bearer token with the admin role.
"""
from fastapi import APIRouter, Depends, Query, status

from storefront.api.deps import (
    get_admin_service,
    get_auth_service,
    get_catalog_service,
    get_order_service,
    require_admin
)
from storefront.schemas.admin import (
    ConfigResponse,
    ConfigUpdate,
    ThemeCreate,
    ThemeUpdate,
    ThemeResponse,
    ThemeListResponse
)
from storefront.schemas.auth import RoleUpdate, ProfileResponse, UserListResponse
from storefront.schemas.common import MessageResponse
from storefront.schemas.order import OrderStatusUpdate, OrderResponse, OrderListResponse
from storefront.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from storefront.services.admin_service import AdminService
from storefront.services.auth_service import AuthService
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# Server configuration

@router.get("/config", response_model=ConfigResponse, summary="Get server configuration")
def get_config(service: AdminService = Depends(get_admin_service)):
    return service.get_config()


@router.put("/config", response_model=ConfigResponse, summary="Update server configuration")
def update_config(
    data: ConfigUpdate,
    service: AdminService = Depends(get_admin_service)
):
    """
    Update several settings at once

    Unknown keys and non-numeric values for number settings reject the
    whole update.
    """
    return service.update_config(data.configs)


# Themes

@router.get("/themes", response_model=ThemeListResponse, summary="List all themes")
def list_themes(service: AdminService = Depends(get_admin_service)):
    return service.list_themes()


@router.post("/themes", response_model=ThemeResponse, status_code=status.HTTP_201_CREATED, summary="Create theme")
def create_theme(
    data: ThemeCreate,
    service: AdminService = Depends(get_admin_service)
):
    return service.create_theme(data)


@router.put("/themes/{theme_id}", response_model=ThemeResponse, summary="Update theme")
def update_theme(
    theme_id: int,
    data: ThemeUpdate,
    service: AdminService = Depends(get_admin_service)
):
    return service.update_theme(theme_id, data)


@router.delete("/themes/{theme_id}", response_model=MessageResponse, summary="Delete theme")
def delete_theme(
    theme_id: int,
    service: AdminService = Depends(get_admin_service)
):
    service.delete_theme(theme_id)
    return MessageResponse(message="Theme deleted successfully")


# Products

@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED,
             summary="Create product")
def create_product(
    data: ProductCreate,
    service: CatalogService = Depends(get_catalog_service)
):
    """
    Create a new product

    - **slug**: unique URL key
    - **category**: category slug
    - **price**: unit price (must be positive)
    """
    return service.create_product(data)


@router.put("/products/{product_id}", response_model=ProductResponse, summary="Update product")
def update_product(
    product_id: int,
    data: ProductUpdate,
    service: CatalogService = Depends(get_catalog_service)
):
    """Update only the provided fields; images and features are replaced when sent"""
    return service.update_product(product_id, data)


@router.delete("/products/{product_id}", response_model=ProductResponse, summary="Deactivate product")
def deactivate_product(
    product_id: int,
    service: CatalogService = Depends(get_catalog_service)
):
    """Hide a product from the shop; existing orders keep referencing it"""
    return service.deactivate_product(product_id)


# Orders

@router.get("/orders", response_model=OrderListResponse, summary="Get all orders")
def list_orders(
    skip: int = Query(0, ge=0, description="Number of orders to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of orders to return"),
    service: OrderService = Depends(get_order_service)
):
    return service.list_orders(skip=skip, limit=limit)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse, summary="Update order status")
def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
):
    """
    Update order status

    - **status**: pending -> completed or cancelled, completed -> cancelled
    """
    return service.update_order_status(order_id, data.status)


# Users

@router.get("/users", response_model=UserListResponse, summary="List users")
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: AuthService = Depends(get_auth_service)
):
    return service.list_users(skip=skip, limit=limit)


@router.put("/users/{user_id}/role", response_model=ProfileResponse, summary="Change user role")
def set_role(
    user_id: int,
    data: RoleUpdate,
    service: AuthService = Depends(get_auth_service)
):
    """Takes effect for the user at their next login"""
    return service.set_role(user_id, data.role)
