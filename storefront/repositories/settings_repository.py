"""
Theme and server config repositories - Data Access Layer
"""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from storefront.models.settings import Theme, ServerConfig


class ThemeRepository:
    """Repository for Theme CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, active_only: bool = False) -> List[Theme]:
        """Get themes, newest first"""
        query = self.db.query(Theme)
        if active_only:
            query = query.filter(Theme.is_active.is_(True))
        return query.order_by(desc(Theme.created_at), desc(Theme.id)).all()

    def get_by_id(self, theme_id: int) -> Optional[Theme]:
        """Get theme by ID"""
        return self.db.query(Theme).filter(Theme.id == theme_id).first()

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a slug is taken"""
        query = self.db.query(Theme.id).filter(Theme.slug == slug)
        if exclude_id is not None:
            query = query.filter(Theme.id != exclude_id)
        return query.first() is not None

    def create(self, theme_data: dict) -> Theme:
        """Create new theme"""
        theme = Theme(**theme_data)
        self.db.add(theme)
        self.db.commit()
        self.db.refresh(theme)
        return theme

    def update(self, theme: Theme, fields: dict) -> Theme:
        """Update only provided fields"""
        for field, value in fields.items():
            setattr(theme, field, value)
        self.db.commit()
        self.db.refresh(theme)
        return theme

    def delete(self, theme: Theme) -> None:
        """Delete theme"""
        self.db.delete(theme)
        self.db.commit()


class ServerConfigRepository:
    """Repository for server key/value settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[ServerConfig]:
        """Get every setting ordered by key"""
        return self.db.query(ServerConfig).order_by(ServerConfig.key).all()

    def get_by_keys(self, keys: List[str]) -> Dict[str, ServerConfig]:
        """Get settings by key"""
        rows = self.db.query(ServerConfig).filter(ServerConfig.key.in_(keys)).all()
        return {row.key: row for row in rows}

    def update_values(self, rows: Dict[str, ServerConfig], values: Dict[str, str]) -> None:
        """Write new values for already-loaded rows in one commit"""
        for key, value in values.items():
            rows[key].value = value
        self.db.commit()

    def create(self, config_data: dict) -> ServerConfig:
        """Create new setting"""
        row = ServerConfig(**config_data)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row
