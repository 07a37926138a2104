"""
Pydantic schemas for accounts and authentication
"""
from pydantic import BaseModel, Field, EmailStr, ConfigDict
from typing import Optional, Literal
from datetime import datetime

from storefront.schemas.common import RequestModel


class RegisterRequest(RequestModel):
    """Schema for registering a new account"""
    username: str = Field(..., min_length=3, max_length=50, description="Unique username")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., min_length=1, description="Plaintext password, hashed before storage")
    game_username: Optional[str] = Field(None, max_length=50, description="In-game username")


class LoginRequest(RequestModel):
    """Schema for logging in with username or email"""
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class ProfileUpdate(RequestModel):
    """Schema for updating the caller's profile"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    game_username: Optional[str] = Field(None, max_length=50)


class PasswordChange(RequestModel):
    """Schema for changing the caller's password"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class RoleUpdate(RequestModel):
    """Schema for changing a user's role"""
    role: Literal["user", "admin"]


class TokenIdentity(BaseModel):
    """Identity embedded in a bearer token"""
    id: int
    username: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserProfile(BaseModel):
    """Schema for user profile response (never includes the password hash)"""
    id: int
    username: str
    email: str
    game_username: Optional[str] = None
    role: str
    vip_status: bool = False
    vip_expires_at: Optional[datetime] = None
    loyalty_points: int = 0
    total_spent: float = 0.0
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Token plus profile returned by register and login"""
    message: str
    token: str
    user: UserProfile


class ProfileResponse(BaseModel):
    """Wrapper for GET /auth/me"""
    user: UserProfile


class UserListResponse(BaseModel):
    """Schema for list of users response"""
    users: list[UserProfile]
    total: int
