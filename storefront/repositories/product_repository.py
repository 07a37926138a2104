"""
Product Repository - Data Access Layer
"""
from typing import Dict, Iterable, List, Optional, Tuple, Union
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import or_, desc, asc, func

from storefront.models.catalog import Category, Product, ProductImage, ProductFeature


ProductRef = Union[int, str]


def split_refs(refs: Iterable[ProductRef]) -> Tuple[List[int], List[str]]:
    """Separate numeric IDs from slugs; digit-only strings count as IDs"""
    ids, slugs = [], []
    for ref in refs:
        if isinstance(ref, int):
            ids.append(ref)
        elif isinstance(ref, str) and ref.isdigit():
            ids.append(int(ref))
        else:
            slugs.append(str(ref))
    return ids, slugs


def ref_key(ref: ProductRef) -> ProductRef:
    """Normalize a reference the same way split_refs does"""
    if isinstance(ref, str) and ref.isdigit():
        return int(ref)
    return ref


class ProductRepository:
    """Repository for Product CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def _with_children(self):
        return self.db.query(Product).options(
            selectinload(Product.category),
            selectinload(Product.images),
            selectinload(Product.features)
        )

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        return self._with_children().filter(Product.id == product_id).first()

    def get_by_slug(self, slug: str) -> Optional[Product]:
        """Get product by slug"""
        return self._with_children().filter(Product.slug == slug).first()

    def get_by_ref(self, ref: ProductRef) -> Optional[Product]:
        """Get product by ID or slug"""
        key = ref_key(ref)
        if isinstance(key, int):
            return self.get_by_id(key)
        return self.get_by_slug(key)

    def get_by_refs(self, refs: Iterable[ProductRef]) -> Dict[ProductRef, Product]:
        """
        Fetch every referenced product in one query

        Returns:
            Mapping from both ID and slug to the product
        """
        ids, slugs = split_refs(refs)
        if not ids and not slugs:
            return {}
        conditions = []
        if ids:
            conditions.append(Product.id.in_(ids))
        if slugs:
            conditions.append(Product.slug.in_(slugs))
        products = self._with_children().filter(or_(*conditions)).all()

        found: Dict[ProductRef, Product] = {}
        for product in products:
            found[product.id] = product
            found[product.slug] = product
        return found

    def search(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        include_inactive: bool = False
    ) -> List[Product]:
        """
        List products filtered by category slug and free-text search

        Sort options:
        - price: cheapest first
        - name: alphabetical
        - popular: popular, then featured
        - anything else: featured, then popular, then newest
        """
        query = self._with_children().join(Product.category)

        if not include_inactive:
            query = query.filter(Product.active.is_(True))

        if category and category != "all":
            query = query.filter(Category.slug == category)

        if search:
            term = f"%{search.lower()}%"
            query = query.filter(or_(
                func.lower(Product.name).like(term),
                func.lower(Product.description).like(term),
                func.lower(Product.short_description).like(term)
            ))

        if sort == "price":
            query = query.order_by(asc(Product.price), asc(Product.id))
        elif sort == "name":
            query = query.order_by(asc(Product.name), asc(Product.id))
        elif sort == "popular":
            query = query.order_by(desc(Product.popular), desc(Product.featured), asc(Product.id))
        else:
            query = query.order_by(
                desc(Product.featured),
                desc(Product.popular),
                desc(Product.created_at),
                desc(Product.id)
            )

        return query.all()

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a slug is taken"""
        query = self.db.query(Product.id).filter(Product.slug == slug)
        if exclude_id is not None:
            query = query.filter(Product.id != exclude_id)
        return query.first() is not None

    def create(self, product_data: dict, images: List[str], features: List[str]) -> Product:
        """Create new product with its images and features"""
        product = Product(**product_data)
        product.images = self._build_images(images)
        product.features = self._build_features(features)
        self.db.add(product)
        self.db.commit()
        return self.get_by_id(product.id)

    def update(self, product: Product, fields: dict,
               images: Optional[List[str]] = None,
               features: Optional[List[str]] = None) -> Product:
        """Update only provided fields; images/features are replaced when given"""
        for field, value in fields.items():
            setattr(product, field, value)
        if images is not None:
            product.images = self._build_images(images)
        if features is not None:
            product.features = self._build_features(features)

        self.db.commit()
        return self.get_by_id(product.id)

    def deactivate(self, product: Product) -> Product:
        """Soft delete: order history keeps referencing the row"""
        product.active = False
        self.db.commit()
        return self.get_by_id(product.id)

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Conditionally subtract stock without committing

        Returns:
            False if the product lacks the stock (nothing is changed)
        """
        updated = self.db.query(Product).filter(
            Product.id == product_id,
            Product.stock_quantity >= quantity
        ).update(
            {Product.stock_quantity: Product.stock_quantity - quantity},
            synchronize_session=False
        )
        return updated == 1

    @staticmethod
    def _build_images(urls: List[str]) -> List[ProductImage]:
        return [
            ProductImage(image_url=url, sort_order=index, is_primary=(index == 0))
            for index, url in enumerate(urls)
        ]

    @staticmethod
    def _build_features(texts: List[str]) -> List[ProductFeature]:
        return [
            ProductFeature(feature_text=text, sort_order=index)
            for index, text in enumerate(texts)
        ]


class CategoryRepository:
    """Repository for Category lookups"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_slug(self, slug: str) -> Optional[Category]:
        """Get category by slug"""
        return self.db.query(Category).filter(Category.slug == slug).first()

    def get_active_with_counts(self) -> List[Tuple[Category, int]]:
        """Active categories in display order, each with its active product count"""
        product_count = func.count(Product.id)
        rows = self.db.query(Category, product_count).outerjoin(
            Product,
            (Product.category_id == Category.id) & (Product.active.is_(True))
        ).filter(
            Category.active.is_(True)
        ).group_by(Category.id).order_by(asc(Category.sort_order), asc(Category.id)).all()
        return [(category, count) for category, count in rows]

    def count(self) -> int:
        """Get total count of categories"""
        return self.db.query(Category).count()

    def create(self, category_data: dict) -> Category:
        """Create new category"""
        category = Category(**category_data)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category
