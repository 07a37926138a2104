"""
Initial data for an empty database: catalog, admin account, themes and server settings
"""
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.logger import get_logger
from storefront.repositories.product_repository import ProductRepository, CategoryRepository
from storefront.repositories.settings_repository import ThemeRepository, ServerConfigRepository
from storefront.repositories.user_repository import UserRepository
from storefront.security import hash_password

logger = get_logger(__name__)

CATEGORIES = [
    {"name": "VIP Membership", "slug": "vip", "description": "Premium server access and privileges", "icon": "👑", "sort_order": 1},
    {"name": "Survival Kits", "slug": "kits", "description": "Essential items and equipment packages", "icon": "📦", "sort_order": 2},
    {"name": "Cosmetic Skins", "slug": "cosmetics", "description": "Character skins and visual customizations", "icon": "🎨", "sort_order": 3},
    {"name": "Boosters", "slug": "boosters", "description": "Experience and resource multipliers", "icon": "⚡", "sort_order": 4},
    {"name": "Bundles", "slug": "bundles", "description": "Value packages with multiple items", "icon": "🎁", "sort_order": 5},
]

PRODUCTS = [
    {
        "category": "vip",
        "name": "VIP Monthly Membership",
        "slug": "vip-monthly",
        "description": "Priority queue, custom chat colors, VIP-only areas and better gather rates for a month.",
        "short_description": "Premium server access with exclusive perks",
        "price": Decimal("9.99"),
        "stock_quantity": 999,
        "popular": True,
        "badge": "Most Popular",
        "game_item_id": "vip_monthly_access",
        "features": ["Priority queue access", "Custom chat colors and tags", "1.5x gather rate bonus"],
        "images": ["https://images.unsplash.com/photo-1606107557195-0e29a4b5b4aa?w=800&h=600&fit=crop"],
    },
    {
        "category": "kits",
        "name": "Starter Survival Kit",
        "slug": "starter-kit",
        "description": "Tools, a bow, medical supplies and building resources for a strong start.",
        "short_description": "Essential items for new players",
        "price": Decimal("4.99"),
        "stock_quantity": 100,
        "max_quantity_per_order": 3,
        "game_item_id": "kit_starter_bundle",
        "features": ["Stone pickaxe and hatchet", "Bow with 30 arrows", "1000 wood and 500 stone"],
        "images": ["https://images.unsplash.com/photo-1504384308090-c894fdcc538d?w=800&h=600&fit=crop"],
    },
    {
        "category": "kits",
        "name": "Elite Raid Kit",
        "slug": "raid-kit",
        "description": "High-tier explosives, weapons and armor for experienced raiders.",
        "short_description": "High-tier raiding equipment",
        "price": Decimal("24.99"),
        "original_price": Decimal("29.99"),
        "stock_quantity": 50,
        "limited_edition": True,
        "badge": "Limited Time",
        "game_item_id": "kit_raid_elite",
        "features": ["10x rockets", "20x satchel charges", "Metal armor set"],
        "images": ["https://images.unsplash.com/photo-1526800544336-d2f0d0346f65?w=800&h=600&fit=crop"],
    },
    {
        "category": "cosmetics",
        "name": "Legendary Bear Skin",
        "slug": "skin-bear",
        "description": "Animated bear skin with particle and sound effects.",
        "short_description": "Exclusive animated bear skin with effects",
        "price": Decimal("12.99"),
        "stock_quantity": 999,
        "popular": True,
        "badge": "Exclusive",
        "game_item_id": "skin_bear_legendary",
        "features": ["Animated bear model", "Custom particle effects"],
        "images": ["https://images.unsplash.com/photo-1564419434-8d4a1a1f0c4a?w=800&h=600&fit=crop"],
    },
    {
        "category": "cosmetics",
        "name": "Mythical Dragon Skin",
        "slug": "skin-dragon",
        "description": "Dragon transformation skin with fire breath and wing effects.",
        "short_description": "Epic dragon skin with fire breath effects",
        "price": Decimal("19.99"),
        "original_price": Decimal("24.99"),
        "stock_quantity": 999,
        "popular": True,
        "limited_edition": True,
        "badge": "Legendary",
        "game_item_id": "skin_dragon_mythical",
        "features": ["Fire breathing animations", "Massive wing spread effects"],
        "images": ["https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=800&h=600&fit=crop"],
    },
    {
        "category": "boosters",
        "name": "2x XP Booster (24h)",
        "slug": "xp-booster-24h",
        "description": "Double experience gains for 24 hours.",
        "short_description": "Double XP gains for 24 hours",
        "price": Decimal("3.99"),
        "stock_quantity": 999,
        "max_quantity_per_order": 10,
        "game_item_id": "booster_xp_2x_24h",
        "features": ["2x experience gain", "24-hour duration", "Instant activation"],
        "images": ["https://images.unsplash.com/photo-1551288049-bebda4e38f71?w=800&h=600&fit=crop"],
    },
    {
        "category": "bundles",
        "name": "Mega Survivor Bundle",
        "slug": "mega-bundle",
        "description": "VIP membership, premium kits, an exclusive skin and boosters in one package.",
        "short_description": "Ultimate survival package with everything included",
        "price": Decimal("49.99"),
        "original_price": Decimal("75.96"),
        "stock_quantity": 25,
        "popular": True,
        "featured": True,
        "limited_edition": True,
        "badge": "Best Value",
        "game_item_id": "bundle_mega_survivor",
        "features": ["VIP Monthly Membership", "Starter + Raid Kits", "5x XP Boosters (24h each)"],
        "images": ["https://images.unsplash.com/photo-1513475382585-d06e58bcb0e0?w=800&h=600&fit=crop"],
    },
]

THEMES = [
    {
        "name": "Midnight Purple",
        "slug": "midnight-purple",
        "description": "Deep purple nights",
        "css_variables": {
            "--color-bg-primary": "#1A0033",
            "--color-bg-secondary": "#0d001a",
            "--color-surface-card": "#2B0052",
            "--color-text-base": "#FFFFFF",
            "--color-accent-primary": "#E74C3C",
            "--color-accent-secondary": "#9B59B6",
            "--color-button-bg": "#E74C3C",
            "--color-button-hover": "#C0392B",
            "--color-border-primary": "#9B59B6",
        },
    },
    {
        "name": "Volcanic",
        "slug": "volcanic",
        "description": "Fiery reds and dark ash",
        "css_variables": {
            "--color-bg-primary": "#1A0E0E",
            "--color-bg-secondary": "#0D0707",
            "--color-surface-card": "#2A1616",
            "--color-text-base": "#FFFFFF",
            "--color-accent-primary": "#FF4444",
            "--color-accent-secondary": "#FF6B6B",
            "--color-button-bg": "#FF4444",
            "--color-button-hover": "#CC0000",
            "--color-border-primary": "#8B0000",
        },
    },
]

SERVER_CONFIG = [
    {"key": "server_ip", "value": "127.0.0.1", "description": "Game server IP address", "config_type": "string"},
    {"key": "server_port", "value": "28015", "description": "Game server port", "config_type": "number"},
    {"key": "query_port", "value": "28017", "description": "Steam query port for server status", "config_type": "number"},
    {"key": "rcon_port", "value": "28016", "description": "RCON port for server administration", "config_type": "number"},
    {"key": "rcon_password", "value": "", "description": "RCON password", "config_type": "password"},
    {"key": "server_name", "value": "Rusty Butter Server", "description": "Display name of the server", "config_type": "string"},
    {"key": "wipe_schedule", "value": "Bi-Weekly (Thursdays 6PM EST)", "description": "Server wipe schedule", "config_type": "string"},
    {"key": "max_players", "value": "100", "description": "Maximum concurrent players", "config_type": "number"},
]


def seed_database(db: Session) -> bool:
    """
    Insert initial data when the catalog is empty

    Returns:
        True if data was inserted
    """
    category_repository = CategoryRepository(db)
    if category_repository.count() > 0:
        return False

    logger.info("Seeding database with initial data...")

    categories = {data["slug"]: category_repository.create(data) for data in CATEGORIES}

    product_repository = ProductRepository(db)
    for data in PRODUCTS:
        fields = {key: value for key, value in data.items() if key not in ("category", "images", "features")}
        fields["category_id"] = categories[data["category"]].id
        product_repository.create(fields, data["images"], data["features"])

    user_repository = UserRepository(db)
    if not user_repository.exists(settings.ADMIN_USERNAME, settings.ADMIN_EMAIL):
        user_repository.create({
            "username": settings.ADMIN_USERNAME,
            "email": settings.ADMIN_EMAIL,
            "password_hash": hash_password(settings.ADMIN_PASSWORD),
            "role": "admin",
            "game_username": "RustyAdmin"
        })
        logger.warning(f"Admin user '{settings.ADMIN_USERNAME}' created; change its password after first login")

    theme_repository = ThemeRepository(db)
    for data in THEMES:
        theme_repository.create({**data, "is_active": True})

    config_repository = ServerConfigRepository(db)
    for data in SERVER_CONFIG:
        config_repository.create(data)

    logger.info(
        f"Seeded {len(CATEGORIES)} categories, {len(PRODUCTS)} products, "
        f"{len(THEMES)} themes and {len(SERVER_CONFIG)} settings"
    )
    return True
