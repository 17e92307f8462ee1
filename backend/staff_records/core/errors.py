"""HTTP error model and handlers.

Every failure leaves the API as an RFC 7807 ``application/problem+json``
document. Two extra members, ``ok: false`` and ``msg``, mirror the success
envelope so the browser client can branch on ``ok`` alone.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from staff_records.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Stable ``code`` for statuses raised by werkzeug rather than by us
STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def problem_response(
    status: int, code: str, message: str, details: dict[str, Any] | None = None
) -> tuple[Response, int]:
    """Build the problem document for the current request.

    :param status: HTTP status.
    :type status: int
    :param code: Machine-readable snake_case identifier.
    :type code: str
    :param message: Client-safe summary; sent as both ``detail`` and ``msg``.
    :type message: str
    :param details: Optional structured extras (validation messages).
    :type details: dict | None
    :returns: ``(response, status)`` ready to return from a handler.
    :rtype: tuple[Response, int]
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
        "ok": False,
        "msg": message,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    response = jsonify(body)
    response.mimetype = PROBLEM_MIMETYPE
    return response, status


class APIError(Exception):
    """
    Error raised by the HTTP layer with its own status and code.

    Parameters
    ----------
    message : str
        Client-facing description.
    status_code : int, optional
        HTTP status, ``400`` by default.
    code : str, optional
        Machine-readable identifier.
    details : dict[str, Any] | None, optional
        Structured payload added to the problem document.
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.BAD_REQUEST,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class BadRequest(APIError):
    def __init__(self, message: str = "Bad request", code: str = "bad_request") -> None:
        super().__init__(message, HTTPStatus.BAD_REQUEST, code)


class NotFound(APIError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, HTTPStatus.NOT_FOUND, "not_found")


class Conflict(APIError):
    def __init__(self, message: str = "Conflict", code: str = "conflict") -> None:
        super().__init__(message, HTTPStatus.CONFLICT, code)


class Unauthorized(APIError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, HTTPStatus.UNAUTHORIZED, "unauthorized")


class Forbidden(APIError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, HTTPStatus.FORBIDDEN, "forbidden")


def init_app(app: Flask) -> None:
    """
    Register the problem+json handlers on ``app``.

    Notes
    -----
    - Service errors go through
      :func:`staff_records.services._shared.base.translate_exceptions` first.
    - 4xx are logged as warnings; 5xx as errors with the traceback. Raw
      database and exception text never reaches the client.
    """
    from staff_records.services._shared.base import translate_exceptions
    from staff_records.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "api.error",
            extra={"code": err.code, "status": err.status_code, "detail": err.message},
        )
        return problem_response(err.status_code, err.code, err.message, err.details or None)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = translate_exceptions(err)
        if isinstance(translated, APIError):
            return handle_api_error(translated)
        return handle_unexpected_error(err)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        log.warning("http.error", extra={"code": code, "status": status})
        return problem_response(status, code, message)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("validation.error", extra={"fields": sorted(map(str, err.messages))})
        return problem_response(
            HTTPStatus.BAD_REQUEST,
            "validation_error",
            "Validation failed",
            {"errors": err.messages},
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Constraint names stay in the log
        log.error("db.integrity_error", exc_info=err)
        return problem_response(HTTPStatus.CONFLICT, "conflict", "Resource already exists")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("db.unavailable", exc_info=err)
        return problem_response(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled.exception", exc_info=err)
        return problem_response(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )
