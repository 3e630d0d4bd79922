"""
Password hashing, bearer tokens and avatar URLs.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from devconnector.config import get_settings

GRAVATAR_URL = "https://www.gravatar.com/avatar"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def gravatar_url(email: str, size: int = 200) -> str:
    """Gravatar for the email, falling back to the "mystery person" image."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"{GRAVATAR_URL}/{digest}?s={size}&r=pg&d=mm"


def create_access_token(user_id: str, expires_in: Optional[int] = None) -> str:
    settings = get_settings()
    if expires_in is None:
        expires_in = settings.jwt_expires_seconds
    payload = {
        "user": {"id": user_id},
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[str]:
    """Return the user id carried by a valid token, or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.PyJWTError:
        return None
    user = payload.get("user") or {}
    return user.get("id")
