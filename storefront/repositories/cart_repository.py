"""
Cart Repository - Data Access Layer
"""
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import asc

from storefront.models.cart import CartItem
from storefront.models.catalog import Product


class CartRepository:
    """Repository for persisted cart lines"""

    def __init__(self, db: Session):
        self.db = db

    def get_lines(self, user_id: int) -> List[CartItem]:
        """Cart lines of a user, oldest first, with their products loaded"""
        return self.db.query(CartItem).options(
            selectinload(CartItem.product).selectinload(Product.images)
        ).filter(
            CartItem.user_id == user_id
        ).order_by(asc(CartItem.created_at), asc(CartItem.id)).all()

    def get_line(self, user_id: int, product_id: int) -> Optional[CartItem]:
        """Get the line for a (user, product) pair"""
        return self.db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).first()

    def upsert(self, user_id: int, product_id: int, quantity: int) -> CartItem:
        """Set the quantity of the (user, product) line, creating it if needed"""
        line = self.get_line(user_id, product_id)
        if line:
            line.quantity = quantity
        else:
            line = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            self.db.add(line)
        self.db.commit()
        self.db.refresh(line)
        return line

    def delete(self, user_id: int, product_id: int) -> bool:
        """Delete a line; returns False if there was none"""
        deleted = self.db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0

    def clear(self, user_id: int) -> int:
        """Delete every line of a user's cart"""
        deleted = self.db.query(CartItem).filter(
            CartItem.user_id == user_id
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
