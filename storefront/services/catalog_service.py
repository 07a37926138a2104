"""
Catalog Service - products and categories
"""
from typing import Optional

from sqlalchemy.orm import Session

from storefront.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.logger import get_logger
from storefront.models.catalog import Product
from storefront.repositories.product_repository import ProductRepository, CategoryRepository
from storefront.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    CategoryResponse,
    CategoryListResponse
)

logger = get_logger(__name__)

ALL_CATEGORY = {"id": "all", "name": "All Items", "icon": "🛍️"}
NULLABLE_PRODUCT_FIELDS = {"description", "short_description", "original_price", "badge", "game_item_id"}


class CatalogService:
    """Service layer for catalog reads and admin product management"""

    def __init__(self, db: Session):
        self.repository = ProductRepository(db)
        self.category_repository = CategoryRepository(db)

    def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None
    ) -> ProductListResponse:
        """Active products filtered by category slug and search text"""
        products = self.repository.search(category=category, search=search, sort=sort)
        return ProductListResponse(
            products=[ProductResponse.from_product(p) for p in products],
            total_count=len(products)
        )

    def get_product(self, slug: str) -> ProductResponse:
        """Get an active product by slug"""
        product = self.repository.get_by_slug(slug)
        if not product or not product.active:
            raise NotFoundError("Product not found")
        return ProductResponse.from_product(product)

    def list_categories(self) -> CategoryListResponse:
        """Active categories with product counts, led by an 'all' entry"""
        rows = self.category_repository.get_active_with_counts()
        categories = [
            CategoryResponse(id=category.slug, name=category.name, icon=category.icon, count=count)
            for category, count in rows
        ]
        total = sum(category.count for category in categories)
        return CategoryListResponse(categories=[CategoryResponse(**ALL_CATEGORY, count=total)] + categories)

    def create_product(self, product_data: ProductCreate) -> ProductResponse:
        """
        Create new product

        Raises:
            ConflictError: Slug already used
            ValidationError: Unknown category
        """
        if self.repository.slug_exists(product_data.slug):
            raise ConflictError(f"Product with slug '{product_data.slug}' already exists")

        fields = product_data.model_dump(exclude={"category", "images", "features"})
        fields["category_id"] = self._category_id(product_data.category)

        product = self.repository.create(fields, product_data.images, product_data.features)
        logger.info(f"Product created: {product.slug} (id={product.id})")
        return ProductResponse.from_product(product)

    def update_product(self, product_id: int, product_data: ProductUpdate) -> ProductResponse:
        """Update only the provided fields of a product"""
        product = self._get(product_id)

        fields = {
            key: value
            for key, value in product_data.model_dump(exclude_unset=True, exclude={"category", "images", "features"}).items()
            if value is not None or key in NULLABLE_PRODUCT_FIELDS
        }
        if product_data.category is not None:
            fields["category_id"] = self._category_id(product_data.category)

        product = self.repository.update(product, fields, product_data.images, product_data.features)
        logger.info(f"Product updated: {product.slug} (id={product.id})")
        return ProductResponse.from_product(product)

    def deactivate_product(self, product_id: int) -> ProductResponse:
        """Soft delete; past orders keep referencing the product"""
        product = self.repository.deactivate(self._get(product_id))
        logger.info(f"Product deactivated: {product.slug} (id={product.id})")
        return ProductResponse.from_product(product)

    def _get(self, product_id: int) -> Product:
        product = self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product with id={product_id} not found")
        return product

    def _category_id(self, slug: str) -> int:
        category = self.category_repository.get_by_slug(slug)
        if not category:
            raise ValidationError(f"Unknown category '{slug}'")
        return category.id
