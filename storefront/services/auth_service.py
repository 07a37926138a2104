"""
Auth Service - accounts, credentials and roles
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from storefront.logger import get_logger
from storefront.models.user import User
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    PasswordChange,
    TokenIdentity,
    UserProfile,
    AuthResponse,
    ProfileResponse,
    UserListResponse
)
from storefront.schemas.common import MessageResponse
from storefront.security import hash_password, verify_password, create_token

logger = get_logger(__name__)


def identity_for(user: User) -> TokenIdentity:
    return TokenIdentity(id=user.id, username=user.username, email=user.email, role=user.role)


class AuthService:
    """Service layer for registration, login and profile management"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = UserRepository(db)

    def register(self, data: RegisterRequest) -> AuthResponse:
        """
        Create an account and log it in

        Raises:
            ValidationError: Password too short
            ConflictError: Username or email already taken
        """
        self._check_password_length(data.password)
        if self.repository.exists(data.username, data.email):
            raise ConflictError("Username or email already exists")

        try:
            user = self.repository.create({
                "username": data.username,
                "email": data.email,
                "password_hash": hash_password(data.password),
                "game_username": data.game_username,
                "role": "user"
            })
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Username or email already exists")

        logger.info(f"User registered: {user.username} (id={user.id})")
        return AuthResponse(
            message="User registered successfully",
            token=create_token(identity_for(user)),
            user=UserProfile.model_validate(user)
        )

    def login(self, data: LoginRequest) -> AuthResponse:
        """
        Authenticate with username or email

        Unknown accounts and wrong passwords raise the same error.
        """
        user = self.repository.get_by_login(data.username)
        if not user or not verify_password(data.password, user.password_hash):
            logger.info(f"Failed login for '{data.username}'")
            raise AuthError("Invalid credentials")

        user = self.repository.touch_last_login(user)
        logger.info(f"User logged in: {user.username} (id={user.id})")
        return AuthResponse(
            message="Login successful",
            token=create_token(identity_for(user)),
            user=UserProfile.model_validate(user)
        )

    def get_profile(self, user_id: int) -> ProfileResponse:
        return ProfileResponse(user=UserProfile.model_validate(self._get_user(user_id)))

    def update_profile(self, user_id: int, data: ProfileUpdate) -> ProfileResponse:
        """
        Update username, email and game username

        Raises:
            ConflictError: Username or email belongs to another account
        """
        user = self._get_user(user_id)
        if self.repository.exists(data.username, data.email, exclude_id=user_id):
            raise ConflictError("Username or email already exists")

        try:
            user = self.repository.update(user, {
                "username": data.username,
                "email": data.email,
                "game_username": data.game_username
            })
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Username or email already exists")

        logger.info(f"Profile updated for user {user_id}")
        return ProfileResponse(user=UserProfile.model_validate(user))

    def change_password(self, user_id: int, data: PasswordChange) -> MessageResponse:
        """
        Replace the password after checking the current one

        Raises:
            ValidationError: New password too short
            AuthError: Current password is wrong
        """
        self._check_password_length(data.new_password, label="New password")
        user = self._get_user(user_id)
        if not verify_password(data.current_password, user.password_hash):
            raise AuthError("Current password is incorrect")

        self.repository.update(user, {"password_hash": hash_password(data.new_password)})
        logger.info(f"Password changed for user {user_id}")
        return MessageResponse(message="Password changed successfully")

    def list_users(self, skip: int = 0, limit: int = 100) -> UserListResponse:
        """Get all users with pagination"""
        users = self.repository.get_all(skip=skip, limit=limit)
        return UserListResponse(
            users=[UserProfile.model_validate(u) for u in users],
            total=self.repository.count()
        )

    def set_role(self, user_id: int, role: str) -> ProfileResponse:
        """
        Change a user's role

        Tokens already issued keep the old role until the user logs in again.
        """
        user = self.repository.update(self._get_user(user_id), {"role": role})
        logger.info(f"Role of user {user_id} set to {role}")
        return ProfileResponse(user=UserProfile.model_validate(user))

    def _get_user(self, user_id: int) -> User:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _check_password_length(password: str, label: str = "Password") -> None:
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(f"{label} must be at least {settings.PASSWORD_MIN_LENGTH} characters")
