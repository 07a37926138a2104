"""
Cart Service - persisted cart of an authenticated user
"""
from decimal import Decimal
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.exceptions import NotFoundError
from storefront.logger import get_logger
from storefront.models.catalog import Product
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import ProductRepository, ref_key
from storefront.schemas.cart import CartLineResponse, CartResponse, GuestCartLine
from storefront.services.cart_reconciler import Cart, reconcile_on_login

logger = get_logger(__name__)


class CartService:
    """Loads a user's cart into a Cart, applies an operation and stores the result"""

    def __init__(self, db: Session):
        self.repository = CartRepository(db)
        self.product_repository = ProductRepository(db)

    def get_cart(self, user_id: int) -> CartResponse:
        """Current cart lines priced from the catalog"""
        lines = [line for line in self.repository.get_lines(user_id) if line.product.active]

        items = []
        total = Decimal("0")
        for line in lines:
            product = line.product
            quantity = min(line.quantity, product.max_quantity_per_order)
            total += Decimal(product.price) * quantity
            items.append(CartLineResponse(
                id=product.id,
                slug=product.slug,
                name=product.name,
                price=float(product.price),
                quantity=quantity,
                max_quantity=product.max_quantity_per_order,
                image=product.images[0].image_url if product.images else None
            ))

        return CartResponse(
            cart_items=items,
            item_count=sum(item.quantity for item in items),
            total=float(total.quantize(Decimal("0.01")))
        )

    def add_item(self, user_id: int, product_ref: Union[int, str], quantity: int) -> CartResponse:
        """
        Add a product to the cart, clamped to its per-order cap

        Raises:
            NotFoundError: If the product does not exist or is inactive
        """
        product = self._get_active_product(product_ref)
        cart = self._load(user_id)
        line = cart.add_item(product.id, quantity, product.max_quantity_per_order)
        if line:
            self.repository.upsert(user_id, product.id, line.quantity)
            logger.info(f"Cart of user {user_id}: product {product.id} -> {line.quantity}")
        return self.get_cart(user_id)

    def set_quantity(self, user_id: int, product_ref: Union[int, str], quantity: int) -> CartResponse:
        """
        Set a line's quantity; zero or less removes the line

        Setting a product that is not in the cart changes nothing.

        Raises:
            NotFoundError: If the product does not exist or is inactive
        """
        product = self._get_active_product(product_ref)
        cart = self._load(user_id)
        if cart.get(product.id) is None:
            return self.get_cart(user_id)

        line = cart.set_quantity(product.id, quantity)
        if line is None:
            self.repository.delete(user_id, product.id)
        else:
            self.repository.upsert(user_id, product.id, line.quantity)
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_ref: Union[int, str]) -> CartResponse:
        """Remove a product from the cart; unknown or absent products are a no-op"""
        product = self.product_repository.get_by_ref(product_ref)
        if product:
            self.repository.delete(user_id, product.id)
        return self.get_cart(user_id)

    def clear(self, user_id: int) -> CartResponse:
        deleted = self.repository.clear(user_id)
        logger.info(f"Cleared {deleted} cart lines of user {user_id}")
        return self.get_cart(user_id)

    def reconcile(
        self,
        user_id: int,
        guest_lines: List[GuestCartLine],
        policy: Optional[str] = None
    ) -> CartResponse:
        """
        Apply the login reconciliation policy to a submitted guest cart

        Guest lines for unknown or inactive products are ignored.
        """
        policy = policy or settings.CART_MERGE_POLICY
        products = self.product_repository.get_by_refs(line.id for line in guest_lines)

        guest_cart = Cart()
        for line in guest_lines:
            product = products.get(ref_key(line.id))
            if product is None or not product.active:
                continue
            guest_cart.add_item(product.id, line.quantity, product.max_quantity_per_order)

        server_cart = self._load(user_id)
        result = reconcile_on_login(guest_cart, server_cart, policy)
        self._store(user_id, server_cart, result)

        logger.info(
            f"Reconciled cart of user {user_id} with policy '{policy}': "
            f"{len(guest_cart)} guest lines, {len(result)} lines kept"
        )
        return self.get_cart(user_id)

    def _get_active_product(self, product_ref: Union[int, str]) -> Product:
        product = self.product_repository.get_by_ref(product_ref)
        if not product or not product.active:
            raise NotFoundError("Product not found")
        return product

    def _load(self, user_id: int) -> Cart:
        cart = Cart()
        for line in self.repository.get_lines(user_id):
            cart.add_item(line.product_id, line.quantity, line.product.max_quantity_per_order)
        return cart

    def _store(self, user_id: int, before: Cart, after: Cart) -> None:
        """Write only the lines that differ between two carts"""
        previous: Dict[int, int] = {line.product_id: line.quantity for line in before}
        current: Dict[int, int] = {line.product_id: line.quantity for line in after}

        for product_id in previous.keys() - current.keys():
            self.repository.delete(user_id, product_id)
        for product_id, quantity in current.items():
            if previous.get(product_id) != quantity:
                self.repository.upsert(user_id, product_id, quantity)
