"""
Pydantic schemas for the catalog
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from decimal import Decimal
from datetime import datetime

from storefront.schemas.common import RequestModel


SortOption = Literal["price", "name", "popular", "featured"]


class ProductBase(RequestModel):
    """Base Product schema with common fields"""
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$",
                      description="URL key, unique")
    description: Optional[str] = Field(None, description="Product description")
    short_description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price")
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2,
                                              description="Price before discount, display only")
    category: str = Field(..., min_length=1, description="Category slug")
    stock_quantity: int = Field(0, ge=0, description="Stock quantity (must be non-negative)")
    max_quantity_per_order: int = Field(99, ge=1, description="Per-order quantity cap")
    is_digital: bool = True
    delivery_time_minutes: int = Field(5, ge=0)
    popular: bool = False
    featured: bool = False
    limited_edition: bool = False
    badge: Optional[str] = Field(None, max_length=50)
    game_item_id: Optional[str] = Field(None, max_length=100)
    images: List[str] = Field(default_factory=list, description="Image URLs, first one is primary")
    features: List[str] = Field(default_factory=list)


class ProductCreate(ProductBase):
    """Schema for creating a new product"""
    pass


class ProductUpdate(RequestModel):
    """Schema for updating a product (all fields optional)"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(None, min_length=1)
    stock_quantity: Optional[int] = Field(None, ge=0)
    max_quantity_per_order: Optional[int] = Field(None, ge=1)
    is_digital: Optional[bool] = None
    delivery_time_minutes: Optional[int] = Field(None, ge=0)
    popular: Optional[bool] = None
    featured: Optional[bool] = None
    limited_edition: Optional[bool] = None
    badge: Optional[str] = Field(None, max_length=50)
    game_item_id: Optional[str] = Field(None, max_length=100)
    active: Optional[bool] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None


class ProductResponse(BaseModel):
    """Schema for product response"""
    id: int
    slug: str
    name: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    discount_percentage: int = 0
    category: str
    category_name: str
    images: List[str] = []
    features: List[str] = []
    popular: bool = False
    featured: bool = False
    limited: bool = False
    badge: Optional[str] = None
    in_stock: bool
    stock_quantity: int
    max_quantity_per_order: int
    delivery_time_minutes: int
    active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        return cls(
            id=product.id,
            slug=product.slug,
            name=product.name,
            description=product.description,
            short_description=product.short_description,
            price=float(product.price),
            original_price=float(product.original_price) if product.original_price is not None else None,
            discount_percentage=product.discount_percentage,
            category=product.category.slug,
            category_name=product.category.name,
            images=[image.image_url for image in product.images],
            features=[feature.feature_text for feature in product.features],
            popular=product.popular,
            featured=product.featured,
            limited=product.limited_edition,
            badge=product.badge,
            in_stock=product.in_stock,
            stock_quantity=product.stock_quantity,
            max_quantity_per_order=product.max_quantity_per_order,
            delivery_time_minutes=product.delivery_time_minutes,
            active=product.active,
            created_at=product.created_at
        )


class ProductListResponse(BaseModel):
    """Schema for list of products response"""
    products: List[ProductResponse]
    total_count: int


class CategoryResponse(BaseModel):
    """Category with its active product count; id is the slug"""
    id: str
    name: str
    icon: Optional[str] = None
    count: int


class CategoryListResponse(BaseModel):
    """Schema for list of categories response"""
    categories: List[CategoryResponse]
