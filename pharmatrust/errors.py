# pharmatrust/errors.py
"""
Error taxonomy shared by services and routes.

Services raise these; register_error_handlers(app) turns them into
{"error": "..."} JSON bodies with the matching HTTP status.
"""

from __future__ import annotations

from typing import Any, Optional

from flask import jsonify, current_app
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException


class PharmaTrustError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PharmaTrustError):
    status_code = 400


class NotFoundError(PharmaTrustError):
    status_code = 404


class ConflictError(PharmaTrustError):
    status_code = 400


class AuthError(PharmaTrustError):
    status_code = 401


class ExternalServiceError(PharmaTrustError):
    status_code = 500


def extract_reason(exc: BaseException, default: str = "Request failed") -> str:
    """
    Pull the most readable message out of an upstream failure.
    Order: exc.reason -> exc.data["message"] -> exc.message -> str(exc).
    """
    reason = getattr(exc, "reason", None)
    if isinstance(reason, str) and reason:
        return reason

    data: Any = getattr(exc, "data", None)
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])

    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message

    return str(exc) or default


def _pydantic_message(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"


def register_error_handlers(app) -> None:

    @app.errorhandler(PharmaTrustError)
    def _handle_app_error(e: PharmaTrustError):
        if e.status_code >= 500:
            current_app.logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(PydanticValidationError)
    def _handle_body_error(e: PydanticValidationError):
        return jsonify({"error": _pydantic_message(e)}), 400

    @app.errorhandler(HTTPException)
    def _handle_http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def _handle_unexpected(e: Exception):
        current_app.logger.exception("Unhandled error")
        return jsonify({"error": str(e) or "Internal server error"}), 500
