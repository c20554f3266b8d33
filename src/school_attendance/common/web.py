"""Request-boundary helpers shared by the Flask controllers."""

from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Optional

from flask import g, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from ..core.session import SessionContext
from .result import OperationResult

logger = logging.getLogger(__name__)

SESSION_ROLE_KEY = "auth_role"
SESSION_ID_KEY = "auth_id"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (UploadError, 502),
)


def store_session(ctx: SessionContext) -> None:
    session.clear()
    session[SESSION_ROLE_KEY] = ctx.role.value
    if ctx.user_id:
        session[SESSION_ID_KEY] = ctx.user_id


def load_session_context() -> Optional[SessionContext]:
    """Resolve the cookie session once per request and cache it on `g`."""

    if "session_ctx" in g:
        return g.session_ctx

    ctx = None
    role_s = session.get(SESSION_ROLE_KEY)
    try:
        role = Role(role_s) if role_s else None
    except ValueError:
        role = None

    if role is not None:
        user_id = session.get(SESSION_ID_KEY)
        if role == Role.ADMIN or user_id:
            ctx = SessionContext(role=role, user_id=user_id)

    g.session_ctx = ctx
    return ctx


def result_response(result: OperationResult, status: int = 200):
    return jsonify(result.to_dict()), status


def error_response(e: Exception, *, action: str):
    """Map an exception from a service call to the uniform failure result."""

    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            return result_response(OperationResult.failure(str(e)), status)

    if isinstance(e, PersistenceError):
        logger.error("Persistence failure while trying to %s: %s", action, e)
    elif isinstance(e, DomainError):
        logger.error("Unhandled domain error while trying to %s: %s", action, e)
    else:
        logger.exception("Unexpected error while trying to %s", action)
    return result_response(OperationResult.failure(f"Failed to {action}"), 500)


def role_required(role: Role):
    """Gate a view on the session role; the view receives the SessionContext as `ctx`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            ctx = load_session_context()
            if ctx is None:
                return result_response(OperationResult.failure("Please log in"), 401)
            if ctx.role != role:
                return result_response(OperationResult.failure("You do not have access to this page"), 403)
            return view(ctx, *args, **kwargs)

        return wrapper

    return decorator


def request_data() -> dict:
    """JSON body when sent, otherwise form fields."""

    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return request.form.to_dict()


def json_field(data: dict, name: str, default: Any = None, *, required: bool = False) -> Any:
    """Read a structured field that forms send as a JSON string."""

    value = data.get(name)
    if value is None or value == "":
        if required:
            raise ValidationError(f"{name} is required")
        return default
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            raise ValidationError(f"{name} is not valid JSON")
    return value
