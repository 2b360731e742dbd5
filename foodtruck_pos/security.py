"""
Password hashing and session tokens.

Passwords are stored as bcrypt hashes. Sessions are stateless HS256 JWTs
with a fixed lifetime; there is no server-side revocation list, so a token
stays valid until it expires.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from foodtruck_pos.config import get_settings


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with a fresh bcrypt salt."""
    rounds = rounds or get_settings().BCRYPT_ROUNDS
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored bcrypt hash."""
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a session token carrying ``data``.

    Args:
        data: Claims to embed (user id, username, role, name)
        expires_delta: Token lifetime, TOKEN_EXPIRE_HOURS when omitted

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expires_delta = expires_delta if expires_delta is not None else timedelta(hours=settings.TOKEN_EXPIRE_HOURS)

    payload = dict(data)
    payload["iat"] = now
    payload["exp"] = now + expires_delta
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry of a session token.

    Raises:
        jwt.PyJWTError: If the token is malformed, tampered with or expired
    """
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
