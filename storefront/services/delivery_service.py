"""
Delivery Service - grants purchased items and tracks delivery state
"""
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.logger import get_logger
from storefront.models.order import Order, OrderItem
from storefront.repositories.order_repository import OrderRepository, ProcessedEventRepository

logger = get_logger(__name__)


class DeliveryService:
    """Consumes OrderCreated events at least once, applies them exactly once"""

    def __init__(self, db: Session):
        self.db = db
        self.order_repository = OrderRepository(db)
        self.event_repository = ProcessedEventRepository(db)

    def process_order_created_event(self, event: Dict) -> bool:
        """
        Process OrderCreated event from RabbitMQ

        Args:
            event: Event envelope with event_id and data.order_id

        Returns:
            True if processed (or already processed), False otherwise
        """
        event_id = event.get("event_id")
        order_data = event.get("data") or {}
        order_id = order_data.get("order_id")

        if not event_id or not order_id:
            logger.warning(f"Invalid OrderCreated event: {event}")
            return False

        try:
            if self.event_repository.is_processed(event_id):
                logger.info(f"Event {event_id} already processed. Skipping.")
                return True

            order = self.order_repository.get_by_id(order_id)
            if not order:
                logger.warning(f"Order {order_id} from event {event_id} not found")
                return False

            pending = [item for item in order.items if not item.delivered]
            for item in pending:
                self._grant(order, item)

            self.order_repository.mark_delivered(order)
            self.event_repository.add_processed(event_id, event.get("event_type", "OrderCreated"))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to record delivery for event {event_id} (order {order_id}): {e}")
            return False

        logger.info(f"Order {order.order_number} delivered ({len(pending)} lines) to {order.customer_game_username}")
        return True

    def _grant(self, order: Order, item: OrderItem) -> None:
        # In-game grant stub: the game server integration is out of scope
        logger.info(
            f"Granting {item.quantity} x '{item.product_name}' (product {item.product_id}) "
            f"to player {order.customer_game_username}"
        )
