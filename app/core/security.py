"""
Security utilities for password hashing and JWT token management.

Default hashing uses ``pbkdf2_sha256`` with a configurable round count
(``PASSWORD_HASH_ROUNDS``). ``bcrypt`` verification is still supported for
backward compatibility with existing hashes.
"""

import re
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Optional

from jose import jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256", "bcrypt"],
    deprecated="auto",
    pbkdf2_sha256__default_rounds=settings.PASSWORD_HASH_ROUNDS,
)

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = "@$!%*?&"
_PASSWORD_RULES = [
    (re.compile(r"[a-z]"), "one lowercase letter"),
    (re.compile(r"[A-Z]"), "one uppercase letter"),
    (re.compile(r"\d"), "one number"),
    (re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARS)}]"), "one special character"),
]


def create_access_token(
    subject: str | Any,
    claims: Optional[dict[str, Any]] = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        subject: The subject (account ID) to encode in the token
        claims: Extra claims to embed alongside the subject
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = dict(claims or {})
    to_encode.update({"exp": expire, "iat": now, "sub": str(subject)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, verify_exp: bool = True) -> dict[str, Any]:
    """
    Decode and verify a JWT access token.

    Args:
        token: Encoded token
        verify_exp: Set to False to accept expired (but validly signed) tokens

    Returns:
        Token claims

    Raises:
        jose.JWTError: On a bad signature, malformed token or expiry
    """
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        options={"verify_exp": verify_exp},
    )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.
    Never raises: malformed or unknown hashes simply do not match.
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using the configured default scheme."""
    return pwd_context.hash(password)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return pwd_context.hash("dummy-password-for-timing")


def burn_verification(password: str) -> None:
    """Spend one verification's worth of time when no account matched."""
    verify_password(password, _dummy_hash())


def password_strength_error(password: str) -> Optional[str]:
    """Return a message describing why ``password`` is too weak, or None."""
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
    missing = [label for pattern, label in _PASSWORD_RULES if not pattern.search(password)]
    if missing:
        return "Password must contain at least " + ", ".join(missing)
    return None
