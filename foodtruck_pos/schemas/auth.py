from pydantic import Field
from typing import Optional

from foodtruck_pos.models.user import UserRole
from foodtruck_pos.schemas.common import CamelModel
from foodtruck_pos.schemas.user import UserResponse


class SessionUser(CamelModel):
    """Identity carried by a session token and attached to each request."""
    user_id: int
    username: str
    role: UserRole
    name: str = ""


class LoginRequest(CamelModel):
    username: str = ""
    password: str = ""


class LoginResponse(CamelModel):
    token: str
    user: UserResponse


class ProfileUpdate(CamelModel):
    """Schema for the "my profile" form."""
    name: str = Field(default="", max_length=255)
    email: str = Field(default="", max_length=255)
    password: Optional[str] = None


class ResetRequest(CamelModel):
    username_or_email: str = ""


class ResetRequestResponse(CamelModel):
    message: str
    code: Optional[str] = None


class ResetPasswordRequest(CamelModel):
    username: str = ""
    token: str = ""
    new_password: str = Field(default="", description="New plain password")
