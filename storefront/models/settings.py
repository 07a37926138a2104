"""
SQLAlchemy models for admin-managed settings: themes and server config
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, JSON, CheckConstraint
from sqlalchemy.sql import func

from storefront.database import Base


class Theme(Base):
    """Named set of CSS variables for the storefront UI"""

    __tablename__ = "themes"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    css_variables = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Theme(id={self.id}, slug='{self.slug}')>"


class ServerConfig(Base):
    """Game server setting stored as a key/value pair"""

    __tablename__ = "server_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=True)
    config_type = Column(String(50), nullable=False, default="string")
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("config_type IN ('string', 'number', 'password')", name="check_config_type_valid"),
    )

    def __repr__(self):
        return f"<ServerConfig(key='{self.key}', type='{self.config_type}')>"
