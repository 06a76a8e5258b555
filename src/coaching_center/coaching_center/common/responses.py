from __future__ import annotations

from typing import Any

import structlog
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.enums import ErrorKind
from ..core.exceptions import DomainError

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INVALID: 400,
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}

GENERIC_ERROR_MESSAGE = "Internal server error"


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": data}), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def error_response(exc: DomainError):
    status = STATUS_BY_KIND.get(exc.kind, 400)
    if status >= 500:
        # Store details never reach the client.
        return fail(GENERIC_ERROR_MESSAGE, status)
    return fail(str(exc), status)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if exc.kind == ErrorKind.INTERNAL:
            logger.error("request_failed", kind=exc.kind.value, error=str(exc))
        return error_response(exc)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return fail(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("unhandled_error")
        return fail(GENERIC_ERROR_MESSAGE, 500)
