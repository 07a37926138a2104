"""
SQLAlchemy catalog models: categories, products, images and features
"""
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import (
    Column, Integer, String, Numeric, Boolean, DateTime, Text, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.database import Base


class Category(Base):
    """Product category (static reference data)"""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    slug = Column(String(50), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    icon = Column(String(10), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    products = relationship("Product", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, slug='{self.slug}')>"


class Product(Base):
    """Purchasable catalog item"""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    slug = Column(String(200), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    max_quantity_per_order = Column(Integer, nullable=False, default=99)
    is_digital = Column(Boolean, nullable=False, default=True)
    delivery_time_minutes = Column(Integer, nullable=False, default=5)
    popular = Column(Boolean, nullable=False, default=False)
    featured = Column(Boolean, nullable=False, default=False)
    limited_edition = Column(Boolean, nullable=False, default=False)
    badge = Column(String(50), nullable=True)
    game_item_id = Column(String(100), nullable=True)
    active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        order_by="ProductImage.sort_order",
        cascade="all, delete-orphan"
    )
    features = relationship(
        "ProductFeature",
        back_populates="product",
        order_by="ProductFeature.sort_order",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("stock_quantity >= 0", name="check_stock_non_negative"),
        CheckConstraint("max_quantity_per_order >= 1", name="check_max_quantity_positive"),
    )

    @property
    def discount_percentage(self) -> int:
        """Whole-percent discount from original_price, 0 when not discounted"""
        if not self.original_price or self.original_price <= self.price:
            return 0
        ratio = (Decimal(self.original_price) - Decimal(self.price)) / Decimal(self.original_price) * 100
        return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    def __repr__(self):
        return f"<Product(id={self.id}, slug='{self.slug}', price={self.price}, stock={self.stock_quantity})>"


class ProductImage(Base):
    """Product image URL"""

    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(String(500), nullable=False)
    alt_text = Column(String(200), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="images")


class ProductFeature(Base):
    """Bullet-point feature of a product"""

    __tablename__ = "product_features"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    feature_text = Column(String(200), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="features")
