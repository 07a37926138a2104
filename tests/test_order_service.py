"""
Tests for order placement and order management
"""
import re
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from storefront.config import settings
from storefront.exceptions import InternalError, ValidationError, NotFoundError
from storefront.models import CartItem, Order, OrderItem, Product, User
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.order import OrderCreate
from storefront.services.auth_service import identity_for
from storefront.services.order_service import OrderService, generate_order_number


def order_request(*items, email="buyer@example.com", username="Survivor"):
    return OrderCreate.model_validate({
        "items": [{"id": ref, "quantity": quantity} for ref, quantity in items],
        "customerInfo": {"email": email, "username": username}
    })


@pytest.fixture
def service(db, publisher):
    return OrderService(db, event_publisher=publisher)


def test_starter_kit_order_totals(service, catalog):
    result = service.place_order(order_request((catalog["starter-kit"], 2)))

    assert result.success is True
    assert result.order.total_amount == pytest.approx(9.98)
    assert result.order.subtotal == pytest.approx(9.98)
    assert len(result.order.items) == 1
    line = result.order.items[0]
    assert line.quantity == 2
    assert line.unit_price == pytest.approx(4.99)
    assert line.total_price == pytest.approx(9.98)
    assert result.dropped_items == []


def test_order_is_stored_as_paid_and_pending_delivery(service, catalog, db):
    result = service.place_order(order_request((catalog["starter-kit"], 1)))

    order = db.query(Order).filter(Order.id == result.order.id).one()
    assert order.status == "completed"
    assert order.payment_status == "paid"
    assert order.delivery_status == "pending"
    assert order.payment_method == settings.DEFAULT_PAYMENT_METHOD
    assert order.user_id is None
    assert order.customer_game_username == "Survivor"


def test_client_price_is_ignored(service, catalog):
    data = OrderCreate.model_validate({
        "items": [{"id": catalog["skin-dragon"], "quantity": 1, "price": 0.01}],
        "customerInfo": {"email": "buyer@example.com", "username": "Survivor"}
    })

    result = service.place_order(data)

    assert result.order.items[0].unit_price == pytest.approx(19.99)
    assert result.order.total_amount == pytest.approx(19.99)


def test_quantity_is_clamped_to_product_cap(service, catalog):
    result = service.place_order(order_request((catalog["starter-kit"], 10)))

    assert result.order.items[0].quantity == 3
    assert result.order.total_amount == pytest.approx(14.97)


def test_products_can_be_referenced_by_slug(service, catalog):
    result = service.place_order(order_request(("skin-dragon", 1), (str(catalog["starter-kit"]), 1)))

    assert sorted(item.product_id for item in result.order.items) == sorted(
        [catalog["skin-dragon"], catalog["starter-kit"]]
    )


def test_repeated_product_becomes_one_capped_line(service, catalog):
    result = service.place_order(order_request((catalog["starter-kit"], 2), ("starter-kit", 2)))

    assert len(result.order.items) == 1
    assert result.order.items[0].quantity == 3


def test_total_is_sum_of_line_totals(service, catalog, db):
    result = service.place_order(order_request(
        (catalog["starter-kit"], 3), (catalog["skin-dragon"], 2), (catalog["xp-booster"], 4)
    ))

    items = db.query(OrderItem).filter(OrderItem.order_id == result.order.id).all()
    for item in items:
        assert item.total_price == item.unit_price * item.quantity
    assert sum(item.total_price for item in items) == Decimal("70.91")
    assert Decimal(str(result.order.total_amount)) == Decimal("70.91")


def test_invalid_lines_are_dropped_and_reported(service, catalog):
    result = service.place_order(order_request(
        (999, 1), (catalog["retired"], 1), (catalog["starter-kit"], 1), ("sold-out", 2)
    ))

    assert len(result.order.items) == 1
    assert [(d.index, d.product, d.reason) for d in result.dropped_items] == [
        (0, 999, "not_found"),
        (1, catalog["retired"], "inactive"),
        (3, "sold-out", "out_of_stock"),
    ]


def test_no_valid_items_rejects_order(service, catalog, db):
    with pytest.raises(ValidationError, match="No valid items in order"):
        service.place_order(order_request((999, 1), (catalog["retired"], 2)))

    assert db.query(Order).count() == 0


def test_zero_stock_only_line_rejects_order(service, catalog, db):
    with pytest.raises(ValidationError, match="No valid items in order"):
        service.place_order(order_request((catalog["sold-out"], 1)))

    assert db.query(Order).count() == 0


def test_empty_items_rejected(service, catalog):
    with pytest.raises(ValidationError, match="Invalid order data"):
        service.place_order(order_request())


def test_authenticated_order_updates_stats_and_clears_cart(service, catalog, db, make_user):
    buyer = make_user("buyer", total_spent=Decimal("10.00"), loyalty_points=10)
    db.add(CartItem(user_id=buyer.id, product_id=catalog["starter-kit"], quantity=2))
    db.commit()

    service.place_order(order_request((catalog["skin-dragon"], 1)), user_id=buyer.id)

    db.expire_all()
    buyer = db.query(User).filter(User.id == buyer.id).one()
    assert buyer.total_spent == Decimal("29.99")
    assert buyer.loyalty_points == 29
    assert db.query(CartItem).filter(CartItem.user_id == buyer.id).count() == 0


def test_guest_order_leaves_users_untouched(service, catalog, db, make_user):
    other = make_user("other")

    service.place_order(order_request((catalog["skin-dragon"], 1)))

    db.expire_all()
    other = db.query(User).filter(User.id == other.id).one()
    assert other.total_spent == Decimal("0")
    assert other.loyalty_points == 0


def test_order_created_event_is_published(service, catalog, publisher):
    result = service.place_order(order_request((catalog["starter-kit"], 2)))

    assert len(publisher.created) == 1
    event = publisher.created[0]
    assert event["order_id"] == result.order.id
    assert event["order_number"] == result.order.order_number
    assert event["items"][0]["game_item_id"] == "kit_starter_bundle"
    assert event["items"][0]["quantity"] == 2


def test_publish_failure_does_not_fail_order(service, catalog, db, publisher):
    publisher.succeed = False

    result = service.place_order(order_request((catalog["starter-kit"], 1)))

    assert db.query(Order).filter(Order.id == result.order.id).count() == 1


def test_delivery_estimate_uses_slowest_line(service, catalog):
    result = service.place_order(order_request((catalog["starter-kit"], 1), (catalog["xp-booster"], 1)))

    assert "within 15 minutes" in result.message
    assert result.message.startswith("Order completed successfully!")
    delta = result.estimated_delivery - result.order.created_at
    assert delta.total_seconds() == 15 * 60


def test_order_number_format():
    number = generate_order_number("RB")
    assert re.fullmatch(r"RB\d{13}\d{1,3}", number)


def test_stock_untouched_by_default(service, catalog, db):
    service.place_order(order_request((catalog["starter-kit"], 2)))

    db.expire_all()
    assert db.query(Product).filter(Product.id == catalog["starter-kit"]).one().stock_quantity == 100


def test_stock_decrement_when_enabled(service, catalog, db, monkeypatch):
    monkeypatch.setattr(settings, "DECREMENT_STOCK_ON_ORDER", True)

    service.place_order(order_request((catalog["starter-kit"], 2)))

    db.expire_all()
    assert db.query(Product).filter(Product.id == catalog["starter-kit"]).one().stock_quantity == 98


def test_insufficient_stock_rolls_back_order(service, catalog, db, monkeypatch):
    monkeypatch.setattr(settings, "DECREMENT_STOCK_ON_ORDER", True)
    product = db.query(Product).filter(Product.id == catalog["starter-kit"]).one()
    product.stock_quantity = 1
    db.commit()

    with pytest.raises(ValidationError, match="Insufficient stock"):
        service.place_order(order_request((catalog["starter-kit"], 2), (catalog["skin-dragon"], 1)))

    db.expire_all()
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    assert db.query(Product).filter(Product.id == catalog["skin-dragon"]).one().stock_quantity == 999


def test_user_order_history_summary(service, catalog, make_user):
    buyer = make_user("buyer")
    service.place_order(order_request((catalog["starter-kit"], 2)), user_id=buyer.id)
    service.place_order(order_request((catalog["skin-dragon"], 1)), user_id=buyer.id)

    history = service.get_user_orders(buyer.id)

    assert len(history.orders) == 2
    assert history.orders[0].items_summary == "Mythical Dragon Skin x1"
    assert history.orders[1].items_summary == "Starter Survival Kit x2"


def test_get_order_visible_to_owner_and_admin_only(service, catalog, make_user):
    owner = make_user("owner")
    stranger = make_user("stranger")
    boss = make_user("boss", role="admin")
    result = service.place_order(order_request((catalog["starter-kit"], 1)), user_id=owner.id)

    assert service.get_order(result.order.id, identity_for(owner)).id == result.order.id
    assert service.get_order(result.order.id, identity_for(boss)).id == result.order.id
    with pytest.raises(NotFoundError):
        service.get_order(result.order.id, identity_for(stranger))


def test_status_transitions(service, catalog, publisher):
    result = service.place_order(order_request((catalog["starter-kit"], 1)))

    updated = service.update_order_status(result.order.id, "cancelled")

    assert updated.status == "cancelled"
    assert publisher.status_changed[-1]["old_status"] == "completed"
    assert publisher.status_changed[-1]["new_status"] == "cancelled"
    with pytest.raises(ValidationError):
        service.update_order_status(result.order.id, "completed")


def test_status_update_of_unknown_order(service):
    with pytest.raises(NotFoundError):
        service.update_order_status(12345, "cancelled")


def test_write_failure_rolls_back_header_and_lines(service, catalog, db, monkeypatch):
    original_add = OrderRepository.add_with_items

    def add_then_fail(self, order_data, items):
        original_add(self, order_data, items)
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(OrderRepository, "add_with_items", add_then_fail)

    with pytest.raises(InternalError, match="Failed to create order"):
        service.place_order(order_request((catalog["starter-kit"], 2)))

    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0


def test_bookkeeping_failure_keeps_order(service, catalog, db, make_user, publisher, monkeypatch):
    buyer = make_user("buyer")
    db.add(CartItem(user_id=buyer.id, product_id=catalog["starter-kit"], quantity=1))
    db.commit()

    def failing_credit(self, user_id, amount, points):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))

    monkeypatch.setattr(UserRepository, "record_purchase", failing_credit)

    result = service.place_order(order_request((catalog["skin-dragon"], 1)), user_id=buyer.id)

    assert result.success is True
    assert db.query(Order).filter(Order.id == result.order.id).count() == 1
    assert db.query(CartItem).filter(CartItem.user_id == buyer.id).count() == 0
    assert len(publisher.created) == 1


def test_cart_clear_failure_keeps_order_and_credit(service, catalog, db, make_user, monkeypatch):
    buyer = make_user("buyer")

    def failing_clear(self, user_id):
        raise OperationalError("DELETE", {}, Exception("database is locked"))

    monkeypatch.setattr(CartRepository, "clear", failing_clear)

    result = service.place_order(order_request((catalog["skin-dragon"], 1)), user_id=buyer.id)

    db.expire_all()
    assert db.query(Order).filter(Order.id == result.order.id).count() == 1
    assert db.query(User).filter(User.id == buyer.id).one().loyalty_points == 19
