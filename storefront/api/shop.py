"""
Shop API endpoints: catalog and checkout
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from storefront.api.deps import get_catalog_service, get_order_service, get_optional_identity
from storefront.schemas.auth import TokenIdentity
from storefront.schemas.order import OrderCreate, OrderPlacementResponse
from storefront.schemas.product import ProductResponse, ProductListResponse, CategoryListResponse
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/shop", tags=["shop"])


@router.get("/products", response_model=ProductListResponse, summary="List products")
def list_products(
    category: Optional[str] = Query(None, description="Category slug, 'all' for every category"),
    search: Optional[str] = Query(None, description="Text searched in name and descriptions"),
    sort: Optional[str] = Query(None, description="price, name, popular or featured (default)"),
    service: CatalogService = Depends(get_catalog_service)
):
    """
    Retrieve active products

    - **category**: Filter by category slug
    - **search**: Case-insensitive substring search
    - **sort**: Ordering of the results
    """
    return service.list_products(category=category, search=search, sort=sort)


@router.get("/products/{slug}", response_model=ProductResponse, summary="Get product by slug")
def get_product(
    slug: str,
    service: CatalogService = Depends(get_catalog_service)
):
    return service.get_product(slug)


@router.get("/categories", response_model=CategoryListResponse, summary="List categories")
def list_categories(service: CatalogService = Depends(get_catalog_service)):
    """Active categories with product counts, preceded by an 'all' entry"""
    return service.list_categories()


@router.post("/orders", response_model=OrderPlacementResponse, status_code=status.HTTP_201_CREATED,
             summary="Place order")
def place_order(
    order_data: OrderCreate,
    identity: Optional[TokenIdentity] = Depends(get_optional_identity),
    service: OrderService = Depends(get_order_service)
):
    """
    Place an order as a guest or an authenticated user

    Prices come from the catalog. Missing, inactive and out-of-stock products
    are left out and reported in **dropped_items**; quantities are capped per
    product.
    """
    return service.place_order(order_data, user_id=identity.id if identity else None)
