from sqlalchemy.orm import Session
from sqlalchemy import or_
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple
import secrets
import logging

import jwt

from foodtruck_pos.config import get_settings
from foodtruck_pos.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from foodtruck_pos.models.user import User
from foodtruck_pos.schemas.auth import SessionUser, ProfileUpdate
from foodtruck_pos.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

MIN_PROFILE_PASSWORD_LENGTH = 6


def validate_session(token: Optional[str]) -> SessionUser:
    """
    Resolve a bearer token into the identity it carries.

    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    if not token:
        raise AuthenticationError("No se proporcionó un token de acceso.")

    try:
        payload = decode_access_token(token)
        return SessionUser(
            user_id=payload["id"],
            username=payload["username"],
            role=payload["role"],
            name=payload.get("name") or "",
        )
    except (jwt.PyJWTError, KeyError, ValueError):
        raise AuthenticationError("Token inválido o expirado.")


def authorize(session: SessionUser, allowed_roles: Iterable[str] = ()) -> SessionUser:
    """
    Check the session's role against an allowlist.

    An empty allowlist admits any authenticated session.

    Raises:
        AuthorizationError: If the role is not in the allowlist
    """
    allowed = [str(getattr(role, "value", role)) for role in allowed_roles]
    if allowed and session.role.value not in allowed:
        raise AuthorizationError("No tiene permisos para acceder a este recurso.")
    return session


class AuthService:
    """
    Service class for login, profile and password recovery.

    Token checks that need no database live in the module-level
    ``validate_session`` and ``authorize`` functions.
    """

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, username: str, password: str) -> Tuple[str, User]:
        """
        Verify credentials and issue a session token.

        Returns:
            Tuple of (token, user)

        Raises:
            AuthenticationError: If the username is unknown or the password is wrong
        """
        user = self.db.query(User).filter(User.username == username).first()

        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for username '{username}'")
            raise AuthenticationError("Usuario o contraseña incorrectos.")

        token = create_access_token({
            "id": user.id,
            "username": user.username,
            "role": user.role.value,
            "name": user.name,
        })
        logger.info(f"User '{user.username}' logged in")
        return token, user

    def get_profile(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("Usuario no encontrado.")
        return user

    def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        """
        Update the caller's own name and e-mail.

        The password is only replaced when the submitted one has at least
        six characters once trimmed; shorter values are ignored.
        """
        user = self.get_profile(user_id)
        user.name = data.name
        user.email = data.email

        if data.password and len(data.password.strip()) >= MIN_PROFILE_PASSWORD_LENGTH:
            user.password_hash = hash_password(data.password)

        self.db.commit()
        self.db.refresh(user)
        return user

    def request_reset(self, username_or_email: str) -> Optional[Tuple[User, str]]:
        """
        Start password recovery for a user found by username or e-mail.

        Returns:
            Tuple of (user, code), or None when no user matches
        """
        if not username_or_email:
            return None

        user = (
            self.db.query(User)
            .filter(or_(User.username == username_or_email, User.email == username_or_email))
            .first()
        )
        if not user:
            logger.info("Password reset requested for an unknown user")
            return None

        code = f"{secrets.randbelow(900000) + 100000}"
        user.reset_code = code
        user.reset_expires = datetime.now() + timedelta(
            minutes=get_settings().RESET_CODE_EXPIRE_MINUTES
        )
        self.db.commit()

        logger.info(f"Password reset code generated for user #{user.id}")
        return user, code

    def reset_password(self, username: str, code: str, new_password: str) -> User:
        """
        Replace the password if ``code`` matches an unexpired reset code.

        Raises:
            ValidationError: If the code is wrong or expired, or the new
                password is empty. The stored hash is left untouched.
        """
        user = self.db.query(User).filter(User.username == username).first()

        if (
            not user
            or not code
            or not user.reset_code
            or not secrets.compare_digest(user.reset_code.encode("utf-8"), code.encode("utf-8"))
            or user.reset_expires is None
            or user.reset_expires <= datetime.now()
        ):
            raise ValidationError("El código es inválido o ha expirado.")

        if not new_password:
            raise ValidationError("La nueva contraseña no puede estar vacía.")

        user.password_hash = hash_password(new_password)
        user.reset_code = None
        user.reset_expires = None
        self.db.commit()

        logger.info(f"Password reset completed for user #{user.id}")
        return user
