import json
import logging
from typing import Optional, Type, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from foodtruck_pos.exceptions import ValidationError
from foodtruck_pos.schemas.auth import SessionUser
from foodtruck_pos.services.auth_service import authorize, validate_session
from foodtruck_pos.utils.cache import CacheService

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def format_validation_errors(exc: PydanticValidationError) -> str:
    """Turn pydantic errors into one readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "Datos inválidos - " + "; ".join(parts)


def json_body(model: Type[ModelT]):
    """
    Dependency factory that reads the request body leniently.

    A missing or malformed JSON body is treated as an empty object and then
    validated against ``model``, so schema defaults still apply and missing
    required fields become a 400 instead of a parse failure.
    """
    async def dependency(request: Request):
        raw = await request.body()
        try:
            data = json.loads(raw) if raw else {}
        except ValueError:
            logger.debug(f"Malformed JSON body on {request.url.path}, using empty object")
            data = {}
        if not isinstance(data, dict):
            data = {}

        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(format_validation_errors(e))

    return dependency


def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_session(request: Request) -> SessionUser:
    return validate_session(get_bearer_token(request))


def require_roles(*roles):
    """
    Dependency factory guarding a route by role.

    With no roles any authenticated session passes. The resolved identity is
    stored on ``request.state.user`` for downstream use.
    """
    def dependency(request: Request, session: SessionUser = Depends(get_current_session)) -> SessionUser:
        authorize(session, roles)
        request.state.user = session
        return session

    return dependency
