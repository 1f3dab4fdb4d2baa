"""Shared bits for the JSON controllers."""
from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, session

from ..attendance.context import AttendanceContext
from ..core.constants import TRANSIENT_ERROR_DISMISS_MS
from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCompletedToday,
    DomainError,
    Forbidden,
    LocationUnavailable,
    NoOpenSession,
    NoteAlreadySaved,
    OperationInProgress,
    OutOfRange,
    SessionAlreadyOpen,
    StoreError,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)

_HTTP_STATUS = (
    (Unauthenticated, 401),
    ((OutOfRange, Forbidden), 403),
    (LocationUnavailable, 422),
    (ValidationError, 400),
    (StoreError, 503),
    ((AlreadyCompletedToday, SessionAlreadyOpen, NoOpenSession, NoteAlreadySaved, OperationInProgress), 409),
)


class SessionIdentity:
    """Identity collaborator backed by the Flask session cookie."""

    def current_user_id(self):
        user_id = session.get("user_id")
        return str(user_id) if user_id else None


def current_context() -> AttendanceContext:
    return AttendanceContext.from_identity(SessionIdentity())


def head_required(view):
    """Allow only the head (supervisor) role; run inside json_api."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        current_context().require_user_id()
        if session.get("role") != Role.HEAD.value:
            raise Forbidden()
        return view(*args, **kwargs)

    return wrapper


def error_payload(e: DomainError) -> dict:
    payload = {
        "success": False,
        "code": e.code,
        "message": str(e),
        "retryable": e.retryable,
        # Business-rule rejections stay until dismissed.
        "dismiss_after_ms": TRANSIENT_ERROR_DISMISS_MS if e.transient else None,
    }
    if isinstance(e, OutOfRange):
        payload["distance_meters"] = round(e.distance_meters)
    return payload


def http_status_for(e: DomainError) -> int:
    for types, status in _HTTP_STATUS:
        if isinstance(e, types):
            return status
    return 400


def json_api(view):
    """Turn domain errors into JSON rejections and anything else into a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return jsonify(error_payload(e)), http_status_for(e)
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "code": "internal_error", "message": "Internal server error"}), 500

    return wrapper
