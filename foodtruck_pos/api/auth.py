import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from kombu.exceptions import OperationalError

from foodtruck_pos.api.deps import json_body, require_roles
from foodtruck_pos.database import get_db
from foodtruck_pos.schemas.auth import (
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    ResetPasswordRequest,
    ResetRequest,
    ResetRequestResponse,
    SessionUser,
)
from foodtruck_pos.schemas.common import MessageResponse
from foodtruck_pos.schemas.user import UserResponse
from foodtruck_pos.services.auth_service import AuthService
from foodtruck_pos.tasks.notification_tasks import send_reset_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

RESET_REQUESTED_MESSAGE = "Si el usuario existe, se ha generado un código."


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Exchange username and password for a bearer token valid for 8 hours."
)
def login(
    credentials: LoginRequest = Depends(json_body(LoginRequest)),
    db: Session = Depends(get_db)
):
    service = AuthService(db)
    token, user = service.authenticate(credentials.username, credentials.password)
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get my profile"
)
def read_me(
    session: SessionUser = Depends(require_roles()),
    db: Session = Depends(get_db)
):
    """Return the caller's stored profile, without credentials."""
    return AuthService(db).get_profile(session.user_id)


@router.put(
    "/me",
    response_model=MessageResponse,
    summary="Update my profile",
    description="Update name and e-mail. A password of at least 6 characters replaces the current one."
)
def update_me(
    session: SessionUser = Depends(require_roles()),
    profile: ProfileUpdate = Depends(json_body(ProfileUpdate)),
    db: Session = Depends(get_db)
):
    AuthService(db).update_profile(session.user_id, profile)
    return MessageResponse(message="Perfil actualizado con éxito.")


@router.post(
    "/reset-request",
    response_model=ResetRequestResponse,
    response_model_exclude_none=True,
    summary="Request a password reset code",
    description="""
    Generates a 6-digit code valid for one hour. Delivery is simulated by a
    background task that logs the code; the code is also returned here.
    """
)
def reset_request(
    payload: ResetRequest = Depends(json_body(ResetRequest)),
    db: Session = Depends(get_db)
):
    outcome = AuthService(db).request_reset(payload.username_or_email)
    if outcome is None:
        return ResetRequestResponse(message=RESET_REQUESTED_MESSAGE)

    user, code = outcome
    try:
        send_reset_code.delay(user.email, user.name, code)
    except OperationalError as e:
        logger.error(f"Could not queue reset code delivery for user #{user.id}: {e}")

    return ResetRequestResponse(message=RESET_REQUESTED_MESSAGE, code=code)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset password with a code"
)
def reset_password(
    payload: ResetPasswordRequest = Depends(json_body(ResetPasswordRequest)),
    db: Session = Depends(get_db)
):
    AuthService(db).reset_password(payload.username, payload.token, payload.new_password)
    return MessageResponse(message="Contraseña actualizada con éxito.")
