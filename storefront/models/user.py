"""
SQLAlchemy User model
"""
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, CheckConstraint
from sqlalchemy.sql import func

from storefront.database import Base


class User(Base):
    """User account"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")
    game_username = Column(String(50), nullable=True)
    loyalty_points = Column(Integer, nullable=False, default=0)
    total_spent = Column(Numeric(10, 2), nullable=False, default=0)
    vip_status = Column(Boolean, nullable=False, default=False)
    vip_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="check_role_valid"),
        CheckConstraint("loyalty_points >= 0", name="check_loyalty_points_non_negative"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
