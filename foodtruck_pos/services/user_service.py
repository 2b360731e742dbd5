from sqlalchemy.orm import Session
from typing import List
import logging

from foodtruck_pos.exceptions import NotFoundError, ValidationError
from foodtruck_pos.models.user import User
from foodtruck_pos.schemas.user import UserCreate, UserUpdate
from foodtruck_pos.security import hash_password

logger = logging.getLogger(__name__)


class UserService:
    """Service class for the admin panel's user management."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"Usuario con ID {user_id} no encontrado.")
        return user

    def get_by_username(self, username: str):
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, user_data: UserCreate) -> User:
        """
        Create a user with a hashed password.

        Raises:
            ValidationError: If the username is already taken
        """
        if self.get_by_username(user_data.username):
            raise ValidationError("El usuario ya existe.")

        user = User(
            username=user_data.username,
            password_hash=hash_password(user_data.password),
            role=user_data.role,
            name=user_data.name,
            email=user_data.email or "",
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User #{user.id} '{user.username}' created with role {user.role.value}")
        return user

    def update_user(self, user_id: int, user_data: UserUpdate) -> User:
        """
        Update a user. Only provided fields change; a missing or empty
        password keeps the stored hash.
        """
        user = self.get_user(user_id)
        update_data = user_data.model_dump(exclude_unset=True)

        password = update_data.pop("password", None)
        username = update_data.get("username")
        if username and username != user.username and self.get_by_username(username):
            raise ValidationError("El usuario ya existe.")

        for field, value in update_data.items():
            if value is not None:
                setattr(user, field, value)

        if password:
            user.password_hash = hash_password(password)

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user_id: int) -> None:
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"User #{user_id} deleted")
