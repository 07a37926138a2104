"""
Tests for catalog, checkout, order history and health endpoints
"""
from datetime import timedelta

import pytest

from storefront.schemas.auth import TokenIdentity
from storefront.security import create_token


def order_payload(*items, **customer):
    return {
        "items": [{"id": ref, "quantity": quantity} for ref, quantity in items],
        "customerInfo": {"email": "buyer@example.com", "username": "Survivor", **customer}
    }


def slugs(response):
    return [product["slug"] for product in response.json()["products"]]


def test_list_products_excludes_inactive(client, catalog):
    response = client.get("/shop/products")

    assert response.status_code == 200
    assert "retired" not in slugs(response)
    assert response.json()["total_count"] == 4


def test_default_sort_is_featured_then_popular(client, catalog):
    assert slugs(client.get("/shop/products"))[:2] == ["xp-booster", "skin-dragon"]


def test_sort_by_price(client, catalog):
    assert slugs(client.get("/shop/products", params={"sort": "price"})) == [
        "xp-booster", "starter-kit", "sold-out", "skin-dragon"
    ]


def test_sort_by_name(client, catalog):
    assert slugs(client.get("/shop/products", params={"sort": "name"})) == [
        "xp-booster", "skin-dragon", "sold-out", "starter-kit"
    ]


def test_filter_by_category(client, catalog):
    assert sorted(slugs(client.get("/shop/products", params={"category": "cosmetics"}))) == ["skin-dragon"]
    assert len(slugs(client.get("/shop/products", params={"category": "all"}))) == 4


@pytest.mark.parametrize("term,expected", [
    ("dragon", ["skin-dragon"]),
    ("fire", ["skin-dragon"]),
    ("NEW PLAYERS", ["starter-kit"]),
    ("nothing-matches", []),
])
def test_search_is_case_insensitive_substring(client, catalog, term, expected):
    assert slugs(client.get("/shop/products", params={"search": term})) == expected


def test_product_detail(client, catalog):
    response = client.get("/shop/products/skin-dragon")

    assert response.status_code == 200
    data = response.json()
    assert data["price"] == 19.99
    assert data["original_price"] == 24.99
    assert data["discount_percentage"] == 20
    assert data["category"] == "cosmetics"
    assert data["category_name"] == "Cosmetic Skins"


def test_product_detail_missing_or_inactive(client, catalog):
    assert client.get("/shop/products/nope").status_code == 404
    assert client.get("/shop/products/retired").status_code == 404


def test_categories_with_counts(client, catalog):
    response = client.get("/shop/categories")

    categories = response.json()["categories"]
    assert [(c["id"], c["count"]) for c in categories] == [("all", 4), ("kits", 3), ("cosmetics", 1)]
    assert categories[0]["name"] == "All Items"


def test_guest_checkout(client, catalog, publisher):
    response = client.post("/shop/orders", json=order_payload((catalog["starter-kit"], 2)))

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["order"]["total_amount"] == 9.98
    assert data["order"]["user_id"] is None
    assert data["order"]["order_number"].startswith("RB")
    assert data["message"] == (
        "Order completed successfully! Items will be delivered to your account within 5 minutes."
    )
    assert len(publisher.created) == 1


def test_checkout_accepts_snake_case(client, catalog):
    response = client.post("/shop/orders", json={
        "items": [{"id": "starter-kit", "quantity": 1}],
        "customer_info": {"email": "buyer@example.com", "username": "Survivor"},
        "payment_method": "paypal"
    })

    assert response.status_code == 201
    assert response.json()["order"]["payment_method"] == "paypal"


def test_checkout_with_only_invalid_items(client, catalog):
    response = client.post("/shop/orders", json=order_payload((999, 1), (catalog["sold-out"], 1)))

    assert response.status_code == 400
    assert response.json() == {"detail": "No valid items in order"}


def test_checkout_reports_dropped_items(client, catalog):
    response = client.post("/shop/orders", json=order_payload((catalog["starter-kit"], 1), ("retired", 1)))

    assert response.status_code == 201
    assert response.json()["dropped_items"] == [{"index": 1, "product": "retired", "reason": "inactive"}]


@pytest.mark.parametrize("customer", [
    {"email": "", "username": "Survivor"},
    {"email": "buyer@example.com", "username": "   "},
    {"email": "not-an-email", "username": "Survivor"},
])
def test_checkout_requires_customer_info(client, catalog, customer):
    response = client.post("/shop/orders", json={
        "items": [{"id": catalog["starter-kit"], "quantity": 1}],
        "customerInfo": customer
    })

    assert response.status_code == 400


def test_checkout_with_invalid_token_continues_as_guest(client, catalog):
    response = client.post(
        "/shop/orders",
        json=order_payload((catalog["starter-kit"], 1)),
        headers={"Authorization": "Bearer garbage"}
    )

    assert response.status_code == 201
    assert response.json()["order"]["user_id"] is None


def test_checkout_with_expired_token_continues_as_guest(client, catalog, user):
    identity = TokenIdentity(id=user.id, username=user.username, email=user.email, role=user.role)
    token = create_token(identity, expires_in=timedelta(seconds=-5))

    response = client.post(
        "/shop/orders",
        json=order_payload((catalog["starter-kit"], 1)),
        headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 201
    assert response.json()["order"]["user_id"] is None


def test_cart_still_rejects_invalid_token(client):
    response = client.get("/cart", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_authenticated_checkout_credits_user_and_clears_cart(client, catalog, user, auth_headers):
    headers = auth_headers(user)
    client.post("/cart", headers=headers, json={"productId": catalog["starter-kit"], "quantity": 2})

    response = client.post("/shop/orders", headers=headers, json=order_payload((catalog["skin-dragon"], 2)))

    assert response.status_code == 201
    assert response.json()["order"]["user_id"] == user.id
    profile = client.get("/auth/me", headers=headers).json()["user"]
    assert profile["total_spent"] == 39.98
    assert profile["loyalty_points"] == 39
    assert client.get("/cart", headers=headers).json()["cart_items"] == []


def test_order_history_and_detail(client, catalog, user, make_user, auth_headers):
    headers = auth_headers(user)
    placed = client.post("/shop/orders", headers=headers, json=order_payload((catalog["starter-kit"], 2))).json()

    history = client.get("/orders", headers=headers)
    detail = client.get(f"/orders/{placed['order']['id']}", headers=headers)
    other = client.get(f"/orders/{placed['order']['id']}", headers=auth_headers(make_user("other")))

    assert history.json()["orders"][0]["items_summary"] == "Starter Survival Kit x2"
    assert detail.status_code == 200
    assert detail.json()["items"][0]["product_name"] == "Starter Survival Kit"
    assert other.status_code == 404


def test_order_history_requires_token(client):
    assert client.get("/orders").status_code == 401


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "healthy"


def test_root(client):
    assert client.get("/").json()["service"] == "storefront-service"
