"""
Pytest configuration: in-memory SQLite, a recording event publisher and
factories for catalog rows and users.
"""
import os

# Must be set before storefront.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EVENTS_ENABLED"] = "false"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_event_publisher
from storefront.database import Base, get_db
from storefront.main import app
from storefront.models import Category, Product, ProductImage, User
from storefront.security import create_token, hash_password
from storefront.services.auth_service import identity_for

# One shared connection so every session sees the same in-memory database
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


class RecordingPublisher:
    """Stands in for EventPublisher; keeps published payloads"""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.created = []
        self.status_changed = []

    def publish_order_created(self, order_data):
        self.created.append(order_data)
        return self.succeed

    def publish_order_status_changed(self, order_data):
        self.status_changed.append(order_data)
        return self.succeed


@pytest.fixture(scope="function", autouse=True)
def setup_database():
    """Fresh schema for each test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def client(publisher):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    # Not used as a context manager: startup hooks would touch the real engine
    yield TestClient(app)
    app.dependency_overrides.clear()


def _product(category, **fields):
    defaults = {
        "description": None,
        "short_description": None,
        "stock_quantity": 100,
        "max_quantity_per_order": 99,
        "delivery_time_minutes": 5,
        "active": True
    }
    defaults.update(fields)
    return Product(category=category, **defaults)


@pytest.fixture
def catalog(db):
    """
    Two categories and five products; returns {slug: product id}

    - starter-kit: 4.99, max 3 per order, stock 100
    - skin-dragon: 19.99 (was 24.99), popular
    - xp-booster: 3.99, max 10, featured, 15-minute delivery
    - sold-out: stock 0
    - retired: inactive
    """
    kits = Category(name="Survival Kits", slug="kits", icon="📦", sort_order=1)
    cosmetics = Category(name="Cosmetic Skins", slug="cosmetics", icon="🎨", sort_order=2)
    db.add_all([kits, cosmetics])

    products = [
        _product(kits, name="Starter Survival Kit", slug="starter-kit", price=Decimal("4.99"),
                 short_description="Essential items for new players",
                 max_quantity_per_order=3, game_item_id="kit_starter_bundle"),
        _product(cosmetics, name="Mythical Dragon Skin", slug="skin-dragon", price=Decimal("19.99"),
                 original_price=Decimal("24.99"), description="Dragon skin with FIRE breath",
                 popular=True, stock_quantity=999),
        _product(kits, name="2x XP Booster", slug="xp-booster", price=Decimal("3.99"),
                 max_quantity_per_order=10, featured=True, delivery_time_minutes=15),
        _product(kits, name="Sold Out Kit", slug="sold-out", price=Decimal("9.99"), stock_quantity=0),
        _product(cosmetics, name="Retired Skin", slug="retired", price=Decimal("1.99"), active=False),
    ]
    products[0].images = [ProductImage(image_url="https://img.example.com/starter.png", sort_order=0, is_primary=True)]
    db.add_all(products)
    db.commit()
    return {product.slug: product.id for product in products}


@pytest.fixture
def make_user(db):
    """Create a user directly in the database"""
    def _make_user(username="player", role="user", password=PASSWORD, **fields):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password),
            role=role,
            game_username=fields.pop("game_username", f"{username}_ingame"),
            **fields
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_token(identity_for(user))}"}
    return _auth_headers


@pytest.fixture
def user(make_user):
    return make_user("player")


@pytest.fixture
def admin(make_user):
    return make_user("boss", role="admin")
