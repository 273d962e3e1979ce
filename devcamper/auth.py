"""
Acting-user access for private routes.

Authentication itself happens upstream: a middleware verifies the caller
and attaches a CurrentUser (or a dict with ``id`` and ``role``) to
``request.state.user``. This module only reads it and applies the
owner-or-admin rule.
"""

import logging
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ValidationError

from devcamper.errors import ErrorResponse

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class CurrentUser(BaseModel):
    id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def get_current_user(request: Request) -> CurrentUser:
    user: Any = getattr(request.state, "user", None)
    if user is None:
        raise ErrorResponse("Not authorized to access this route", 401)
    if isinstance(user, CurrentUser):
        return user
    try:
        return CurrentUser.model_validate(user)
    except ValidationError:
        logger.warning(f"Malformed user on {request.method} {request.url.path}: {user!r}")
        raise ErrorResponse("Not authorized to access this route", 401)


def authorize_owner_or_admin(bootcamp, user: CurrentUser, action: str) -> None:
    """Raise 401 unless ``user`` owns ``bootcamp`` or is an admin."""
    if bootcamp.user_id != user.id and not user.is_admin:
        raise ErrorResponse(f"User {user.id} is not authorized to {action} this bootcamp", 401)
