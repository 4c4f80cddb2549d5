"""Shared pieces of the JSON controllers: session guards and error mapping.

The caller's identity (user_id, role) is put into the Flask session by the
external authentication service; controllers only read it.
"""

from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    NotFoundError,
    PreconditionViolation,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error(status: int, msg: str, code: str):
    return jsonify({"success": False, "code": code, "msg": msg}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return _error(401, "Please log in to continue", "unauthenticated")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return _error(401, "Please log in to continue", "unauthenticated")
        if session.get("role") != Role.ADMIN.value:
            return _error(403, "Admin access required", AuthorizationError.code)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def require_owner_or_admin(member_id: int) -> None:
    if session.get("role") != Role.ADMIN.value and current_user_id() != int(member_id):
        raise AuthorizationError("Not authorized")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return _error(404, str(e), e.code)

    @app.errorhandler(AuthorizationError)
    def handle_forbidden(e: AuthorizationError):
        return _error(403, str(e), e.code)

    @app.errorhandler(PreconditionViolation)
    def handle_precondition(e: PreconditionViolation):
        logger.warning("Rule violated: %s", e)
        return _error(400, str(e), e.code)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(400, str(e), e.code)

    @app.errorhandler(StorageError)
    def handle_storage(e: StorageError):
        logger.error("Storage failure: %s", e)
        return _error(500, "Server error", e.code)

    @app.errorhandler(DomainError)
    def handle_domain(e: DomainError):
        return _error(400, str(e), e.code)
