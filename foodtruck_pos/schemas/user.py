from pydantic import Field
from datetime import datetime
from typing import Optional

from foodtruck_pos.models.user import UserRole
from foodtruck_pos.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Schema for creating a user from the admin panel."""
    username: str = Field(..., min_length=1, max_length=100, description="Login name")
    password: str = Field(..., min_length=1, description="Plain password, hashed before storage")
    role: UserRole = Field(default=UserRole.SELLER, description="Access role")
    name: str = Field(default="", max_length=255, description="Display name")
    email: Optional[str] = Field(default="", max_length=255, description="Contact e-mail")


class UserUpdate(CamelModel):
    """Schema for updating a user. Omitting password keeps the current one."""
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    password: Optional[str] = None
    role: Optional[UserRole] = None
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)


class UserResponse(CamelModel):
    """User as exposed to clients. Credentials never leave the server."""
    id: int
    username: str
    role: UserRole
    name: str
    email: Optional[str] = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
