"""
User Repository - Data Access Layer
"""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import or_, func

from storefront.models.user import User


class UserRepository:
    """Repository for User CRUD operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_login(self, username_or_email: str) -> Optional[User]:
        """Get user whose username or email matches exactly"""
        return self.db.query(User).filter(
            or_(User.username == username_or_email, User.email == username_or_email)
        ).first()

    def exists(self, username: str, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether the username or email is taken (optionally ignoring one user)"""
        query = self.db.query(User.id).filter(
            or_(User.username == username, User.email == email)
        )
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def get_all(self, skip: int = 0, limit: int = 100) -> List[User]:
        """Get all users with pagination"""
        return self.db.query(User).order_by(User.id).offset(skip).limit(limit).all()

    def count(self) -> int:
        """Get total count of users"""
        return self.db.query(User).count()

    def create(self, user_data: dict) -> User:
        """Create new user"""
        user = User(**user_data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User, fields: dict) -> User:
        """Update the given fields of a user"""
        for field, value in fields.items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def touch_last_login(self, user: User) -> User:
        """Record a successful login"""
        user.last_login = func.now()
        self.db.commit()
        self.db.refresh(user)
        return user

    def record_purchase(self, user_id: int, amount: Decimal, points: int) -> bool:
        """
        Add an order total to the user's spend and loyalty points

        Both counters are incremented in SQL so concurrent orders do not
        overwrite each other.

        Returns:
            True if the user exists
        """
        updated = self.db.query(User).filter(User.id == user_id).update(
            {
                User.total_spent: User.total_spent + amount,
                User.loyalty_points: User.loyalty_points + points
            },
            synchronize_session=False
        )
        self.db.commit()
        return updated > 0
