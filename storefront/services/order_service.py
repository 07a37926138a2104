"""
Order Service - Business Logic Layer
"""
import math
import random
import time
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.exceptions import ValidationError, NotFoundError, InternalError
from storefront.logger import get_logger
from storefront.models.order import Order
from storefront.publishers.event_publisher import EventPublisher
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository, ref_key
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.auth import TokenIdentity
from storefront.schemas.order import (
    OrderCreate,
    OrderResponse,
    OrderListResponse,
    DroppedItem,
    OrderPlacementResponse,
    OrderSummaryResponse,
    OrderHistoryResponse
)

logger = get_logger(__name__)

# Allowed admin status changes
STATUS_TRANSITIONS = {
    "pending": {"completed", "cancelled"},
    "completed": {"cancelled"},
    "cancelled": set()
}


def generate_order_number(prefix: Optional[str] = None) -> str:
    """<prefix><epoch millis><random 0-999>"""
    prefix = settings.ORDER_NUMBER_PREFIX if prefix is None else prefix
    return f"{prefix}{int(time.time() * 1000)}{random.randint(0, 999)}"


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session, event_publisher: Optional[EventPublisher] = None):
        self.db = db
        self.repository = OrderRepository(db)
        self.product_repository = ProductRepository(db)
        self.user_repository = UserRepository(db)
        self.cart_repository = CartRepository(db)
        self.event_publisher = event_publisher or EventPublisher()

    def place_order(self, order_data: OrderCreate, user_id: Optional[int] = None) -> OrderPlacementResponse:
        """
        Place an order priced from the catalog

        Steps:
        1. Validate customer info and that items were sent
        2. Re-fetch every referenced product; drop missing, inactive and
           out-of-stock lines
        3. Clamp each quantity to the product's per-order cap
        4. Write header and lines in one transaction (optionally decrementing stock)
        5. For authenticated buyers, credit spend and loyalty points and clear the cart
        6. Publish OrderCreated

        Args:
            order_data: Requested lines and customer info; client prices are never read
            user_id: Authenticated buyer, None for guests

        Returns:
            The stored order, the dropped lines and the delivery estimate

        Raises:
            ValidationError: Missing customer info, no items, or no valid items
            InternalError: The order could not be stored
        """
        customer = order_data.customer_info
        if not customer.email or not customer.username.strip():
            raise ValidationError("Customer email and game username are required")
        if not order_data.items:
            raise ValidationError("Invalid order data")

        products = self.product_repository.get_by_refs(item.id for item in order_data.items)

        # product id -> line; a product requested twice is one line
        lines: Dict[int, dict] = {}
        dropped: List[DroppedItem] = []
        for index, item in enumerate(order_data.items):
            product = products.get(ref_key(item.id))
            if product is None:
                dropped.append(DroppedItem(index=index, product=item.id, reason="not_found"))
                continue
            if not product.active:
                dropped.append(DroppedItem(index=index, product=item.id, reason="inactive"))
                continue
            if product.stock_quantity <= 0:
                dropped.append(DroppedItem(index=index, product=item.id, reason="out_of_stock"))
                continue

            line = lines.setdefault(product.id, {"product": product, "quantity": 0})
            line["quantity"] = min(line["quantity"] + item.quantity, product.max_quantity_per_order)

        if not lines:
            logger.info(f"Rejected order of user {user_id}: no valid items ({len(dropped)} dropped)")
            raise ValidationError("No valid items in order")

        item_rows = []
        total = Decimal("0.00")
        for line in lines.values():
            product = line["product"]
            unit_price = Decimal(product.price)
            line_total = unit_price * line["quantity"]
            total += line_total
            item_rows.append({
                "product_id": product.id,
                "product_name": product.name,
                "unit_price": unit_price,
                "quantity": line["quantity"],
                "total_price": line_total
            })

        order_dict = {
            "order_number": generate_order_number(),
            "user_id": user_id,
            "status": "completed",
            "payment_status": "paid",
            "payment_method": order_data.payment_method or settings.DEFAULT_PAYMENT_METHOD,
            "subtotal": total,
            "total_amount": total,
            "currency": "USD",
            "customer_email": customer.email,
            "customer_game_username": customer.username,
            "delivery_status": "pending"
        }

        try:
            order = self.repository.add_with_items(order_dict, item_rows)
            if settings.DECREMENT_STOCK_ON_ORDER:
                for line in lines.values():
                    product = line["product"]
                    if not self.product_repository.decrement_stock(product.id, line["quantity"]):
                        raise ValidationError(f"Insufficient stock for {product.name}")
            self.db.commit()
        except ValidationError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create order {order_dict['order_number']} of user {user_id}: {e}")
            raise InternalError("Failed to create order")

        order = self.repository.get_by_id(order.id)
        logger.info(
            f"Order {order.order_number} created: {len(order.items)} lines, "
            f"total {order.total_amount} {order.currency}, user {user_id}"
        )

        if user_id is not None:
            self._record_purchase(user_id, order)

        self._publish_order_created(order, lines)

        delivery_minutes = max(line["product"].delivery_time_minutes for line in lines.values())
        return OrderPlacementResponse(
            success=True,
            order=OrderResponse.model_validate(order),
            dropped_items=dropped,
            estimated_delivery=order.created_at + timedelta(minutes=delivery_minutes),
            message=(
                "Order completed successfully! Items will be delivered to your account "
                f"within {delivery_minutes} minutes."
            )
        )

    def get_user_orders(self, user_id: int) -> OrderHistoryResponse:
        """Order history of a user, newest first"""
        orders = self.repository.get_by_user(user_id)
        return OrderHistoryResponse(orders=[
            OrderSummaryResponse(
                id=order.id,
                order_number=order.order_number,
                total_amount=float(order.total_amount),
                status=order.status,
                payment_status=order.payment_status,
                delivery_status=order.delivery_status,
                items_summary=", ".join(f"{item.product_name} x{item.quantity}" for item in order.items),
                created_at=order.created_at
            )
            for order in orders
        ])

    def get_order(self, order_id: int, identity: TokenIdentity) -> OrderResponse:
        """
        Get an order visible to the caller

        Orders of other users look the same as missing ones.
        """
        order = self.repository.get_by_id(order_id)
        if not order or (order.user_id != identity.id and not identity.is_admin):
            raise NotFoundError(f"Order with id={order_id} not found")
        return OrderResponse.model_validate(order)

    def list_orders(self, skip: int = 0, limit: int = 100) -> OrderListResponse:
        """Get all orders with pagination"""
        orders = self.repository.get_all(skip=skip, limit=limit)
        total = self.repository.count()

        return OrderListResponse(
            orders=[OrderResponse.model_validate(o) for o in orders],
            total=total
        )

    def update_order_status(self, order_id: int, new_status: str) -> OrderResponse:
        """
        Update order status

        Raises:
            NotFoundError: Unknown order
            ValidationError: The transition is not allowed
        """
        order = self.repository.get_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order with id={order_id} not found")

        old_status = order.status
        if new_status not in STATUS_TRANSITIONS.get(old_status, set()):
            raise ValidationError(f"Cannot change order status from '{old_status}' to '{new_status}'")

        order = self.repository.update_status(order_id, new_status)
        logger.info(f"Order {order.order_number} status: {old_status} -> {new_status}")

        event_data = {
            "order_id": order.id,
            "order_number": order.order_number,
            "old_status": old_status,
            "new_status": order.status,
            "updated_at": order.updated_at.isoformat() if order.updated_at else None
        }
        if not self.event_publisher.publish_order_status_changed(event_data):
            logger.warning(f"OrderStatusChanged for order {order.order_number} was not published")

        return OrderResponse.model_validate(order)

    def _record_purchase(self, user_id: int, order: Order) -> None:
        """Post-commit bookkeeping; failures here never undo the order"""
        total = Decimal(order.total_amount)
        try:
            if not self.user_repository.record_purchase(user_id, total, math.floor(total)):
                logger.warning(f"User {user_id} not found while crediting order {order.order_number}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update stats of user {user_id} for order {order.order_number}: {e}")

        try:
            self.cart_repository.clear(user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to clear cart of user {user_id} after order {order.order_number}: {e}")

    def _publish_order_created(self, order: Order, lines: Dict[int, dict]) -> None:
        event_data = {
            "order_id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "customer_email": order.customer_email,
            "customer_game_username": order.customer_game_username,
            "total_amount": float(order.total_amount),
            "currency": order.currency,
            "items": [
                {
                    "order_item_id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "game_item_id": lines[item.product_id]["product"].game_item_id,
                    "quantity": item.quantity
                }
                for item in order.items
            ]
        }
        if not self.event_publisher.publish_order_created(event_data):
            logger.warning(f"OrderCreated for order {order.order_number} was not published")
