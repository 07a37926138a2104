"""
Password hashing and bearer token helpers
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.hash import bcrypt

from storefront.config import settings
from storefront.exceptions import AuthError
from storefront.schemas.auth import TokenIdentity


def hash_password(plain: str) -> str:
    """One-way salted bcrypt hash"""
    return bcrypt.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Compare a plaintext password with a stored hash; malformed hashes never match"""
    try:
        return bcrypt.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def create_token(identity: TokenIdentity, expires_in: Optional[timedelta] = None) -> str:
    """
    Issue a signed, time-limited token embedding the user's identity

    Args:
        identity: id, username, email and role to embed
        expires_in: Lifetime override (defaults to JWT_EXPIRE_DAYS)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload = {
        **identity.model_dump(),
        "iat": now,
        "exp": now + lifetime
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> TokenIdentity:
    """
    Verify a token and return the identity it carries

    Raises:
        AuthError: On any signature, format or expiry problem
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]}
        )
        return TokenIdentity(
            id=payload["id"],
            username=payload["username"],
            email=payload["email"],
            role=payload["role"]
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except (jwt.PyJWTError, KeyError, ValueError):
        raise AuthError("Invalid token")
