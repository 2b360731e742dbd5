from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
import enum

from foodtruck_pos.database import Base


class UserRole(str, enum.Enum):
    """Roles that gate the API."""
    ADMIN = "admin"
    SELLER = "seller"


class User(Base):
    """
    User model for back-office and point-of-sale staff.

    Attributes:
        id: Unique identifier for the user
        username: Login name (unique)
        password_hash: bcrypt hash of the password, never serialised
        role: Access role (admin or seller)
        name: Display name, copied onto every sale the user records
        email: Optional contact address, used for password recovery
        reset_code: Pending one-time password reset code
        reset_expires: Expiry of the pending reset code
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.SELLER,
    )
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="", index=True)
    reset_code = Column(String(12), nullable=True)
    reset_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
