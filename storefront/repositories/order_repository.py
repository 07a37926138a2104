"""
Order Repository - Data Access Layer
"""
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import desc

from storefront.models.order import Order, OrderItem, ProcessedEvent


class OrderRepository:
    """Repository for Order CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def _with_items(self):
        return self.db.query(Order).options(selectinload(Order.items))

    def get_all(self, skip: int = 0, limit: int = 100) -> List[Order]:
        """Get all orders with pagination"""
        return self._with_items().order_by(
            desc(Order.created_at), desc(Order.id)
        ).offset(skip).limit(limit).all()

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""
        return self._with_items().filter(Order.id == order_id).first()

    def get_by_user(self, user_id: int) -> List[Order]:
        """Get orders placed by a user, newest first"""
        return self._with_items().filter(
            Order.user_id == user_id
        ).order_by(desc(Order.created_at), desc(Order.id)).all()

    def add_with_items(self, order_data: dict, items: List[dict]) -> Order:
        """
        Stage an order header and its lines in the current transaction

        Nothing is committed; the caller commits or rolls back the unit of work.
        """
        order = Order(**order_data)
        order.items = [OrderItem(**item) for item in items]
        self.db.add(order)
        self.db.flush()
        return order

    def update_status(self, order_id: int, new_status: str) -> Optional[Order]:
        """Update order status"""
        order = self.get_by_id(order_id)
        if not order:
            return None

        order.status = new_status
        self.db.commit()
        self.db.refresh(order)
        return order

    def mark_delivered(self, order: Order) -> Order:
        """Flag every undelivered line and the order as delivered without committing"""
        now = datetime.now(timezone.utc)
        for item in order.items:
            if not item.delivered:
                item.delivered = True
                item.delivered_at = now
        order.delivery_status = "delivered"
        order.delivered_at = now
        return order

    def count(self) -> int:
        """Get total count of orders"""
        return self.db.query(Order).count()


class ProcessedEventRepository:
    """Repository for tracking processed events (idempotency)"""

    def __init__(self, db: Session):
        self.db = db

    def is_processed(self, event_id: str) -> bool:
        """Check if event was already processed"""
        return self.db.query(ProcessedEvent).filter(
            ProcessedEvent.event_id == event_id
        ).first() is not None

    def add_processed(self, event_id: str, event_type: str) -> ProcessedEvent:
        """Stage the processed marker in the current transaction"""
        processed_event = ProcessedEvent(
            event_id=event_id,
            event_type=event_type
        )
        self.db.add(processed_event)
        return processed_event
