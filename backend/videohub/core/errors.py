"""Centralized JSON envelope error handling for the API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from videohub.core.logger import ensure_request_id
from videohub.services._shared.errors import ErrorKind, ServiceError

log = logging.getLogger(__name__)

#: Single translation table from service error kinds to HTTP statuses.
STATUS_BY_KIND: Mapping[ErrorKind, int] = {
    ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.AUTH: HTTPStatus.UNAUTHORIZED,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
}


def error_envelope(
    *,
    status: int,
    message: str,
    errors: list[Any] | None = None,
) -> dict[str, Any]:
    """
    Build the failure envelope shared by every error response.

    :param status: HTTP status code.
    :param message: Human-readable error summary (safe for clients).
    :param errors: Optional structured details.
    :returns: Envelope dictionary with ``success`` set to ``False``.
    :rtype: dict
    """
    return {
        "statusCode": int(status),
        "data": None,
        "message": message,
        "success": False,
        "errors": list(errors or []),
    }


def _envelope_response(status: int, message: str, errors: list[Any] | None = None) -> Response:
    resp = jsonify(error_envelope(status=status, message=message, errors=errors))
    resp.status_code = int(status)
    return resp


class APIError(Exception):
    """
    Represent a JSON-serializable API error raised from the HTTP layer.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    errors : list[Any] | None, optional
        Optional structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        errors: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.errors = errors or []


def init_app(app: Flask) -> None:
    """
    Attach JSON envelope error handlers to the Flask app.

    Notes
    -----
    - Every handled failure renders ``{statusCode, data, message, success, errors}``.
    - Service errors are mapped through :data:`STATUS_BY_KIND` only.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: status=%s msg=%s request_id=%s",
            err.status_code,
            err.message,
            ensure_request_id(),
        )
        return _envelope_response(err.status_code, err.message, err.errors)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status = STATUS_BY_KIND.get(err.kind, HTTPStatus.BAD_REQUEST)
        log.warning(
            "ServiceError: kind=%s status=%s msg=%s request_id=%s",
            err.kind.value,
            status,
            err.message,
            ensure_request_id(),
        )
        return _envelope_response(status, err.message, err.errors)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s detail=%s request_id=%s", status, message, ensure_request_id())
        return _envelope_response(status, message)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        return _envelope_response(HTTPStatus.BAD_REQUEST, "Validation failed", [messages])

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError: request_id=%s", ensure_request_id(), exc_info=True)
        return _envelope_response(HTTPStatus.CONFLICT, "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError: request_id=%s", ensure_request_id(), exc_info=True)
        return _envelope_response(
            HTTPStatus.SERVICE_UNAVAILABLE, "Service temporarily unavailable"
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("Unhandled exception: request_id=%s", ensure_request_id(), exc_info=True)
        return _envelope_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")
