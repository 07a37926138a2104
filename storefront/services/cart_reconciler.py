"""
Cart domain object and guest-cart reconciliation

A Cart holds at most one line per product and every line's quantity stays in
[1, max_quantity]. Nothing here touches the database; CartService loads and
stores carts around these operations.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional


REPLACE = "replace"
MERGE = "merge"


@dataclass
class CartLine:
    """Product reference plus quantity and the product's per-order cap"""
    product_id: int
    quantity: int
    max_quantity: int


class Cart:
    """Ordered collection of cart lines keyed by product"""

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: List[CartLine] = []
        for line in lines or []:
            self.add_item(line.product_id, line.quantity, line.max_quantity)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, product_id: int) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def add_item(self, product_id: int, quantity: int, max_quantity: int) -> Optional[CartLine]:
        """
        Add quantity of a product, clamping the line to max_quantity

        Requests over the cap are silently reduced; non-positive requests are
        ignored.

        Returns:
            The resulting line, or None if nothing was added
        """
        if quantity <= 0:
            return self.get(product_id)

        cap = max(max_quantity, 1)
        line = self.get(product_id)
        if line:
            line.max_quantity = cap
            line.quantity = min(line.quantity + quantity, cap)
            return line

        line = CartLine(product_id=product_id, quantity=min(quantity, cap), max_quantity=cap)
        self._lines.append(line)
        return line

    def set_quantity(self, product_id: int, quantity: int) -> Optional[CartLine]:
        """Set a line's quantity; zero or less removes it, absent products are ignored"""
        line = self.get(product_id)
        if line is None:
            return None
        if quantity <= 0:
            self.remove_item(product_id)
            return None
        line.quantity = min(quantity, line.max_quantity)
        return line

    def remove_item(self, product_id: int) -> None:
        """Drop the line for a product; removing an absent product does nothing"""
        self._lines = [line for line in self._lines if line.product_id != product_id]

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self.lines)


def reconcile_on_login(guest_cart: Cart, server_cart: Cart, policy: str = REPLACE) -> Cart:
    """
    Decide what a user's cart holds after a guest authenticates

    Policies:
    - replace: the persisted cart wins and the guest cart is discarded
    - merge: guest lines are added to the persisted cart, clamped per product

    Neither input is modified.
    """
    result = Cart(server_cart.lines)
    if policy == REPLACE:
        return result
    if policy != MERGE:
        raise ValueError(f"Unknown cart merge policy: {policy}")

    for line in guest_cart:
        result.add_item(line.product_id, line.quantity, line.max_quantity)
    return result
