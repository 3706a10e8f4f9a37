"""
Error taxonomy and the failure envelope.

Every failure a handler can report is a :class:`RelayError` carrying
the HTTP status and the message placed in the ``error`` field of the
response envelope.  ``register_exception_handlers`` wires these, and
the framework's own request validation and HTTP errors, into the
same ``{"success": false, "error": ...}`` shape.
"""

import logging
from typing import Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

API_KEY_NOT_CONFIGURED = "Coolify API key not configured"


class RelayError(Exception):
    """Base class for errors converted into the failure envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(RelayError):
    """The provider credential or base URL is missing."""

    def __init__(self, message: str = API_KEY_NOT_CONFIGURED) -> None:
        super().__init__(message)


class MissingFieldsError(RelayError):
    """Required request input is absent."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, fields: Iterable[str]) -> None:
        fields = list(fields)
        if len(fields) == 1:
            message = f"Missing required field: {fields[0]}"
        else:
            message = f"Missing required fields: {', '.join(fields)}"
        super().__init__(message)
        self.fields = fields


class BadRequestError(RelayError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(RelayError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(RelayError):
    """The provider rejected the call or could not be reached."""


def require_fields(body: dict, *names: str) -> None:
    """Raise :class:`MissingFieldsError` listing ``names`` if any is falsy in ``body``."""
    if any(not body.get(name) for name in names):
        raise MissingFieldsError(names)


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": error}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Render relay, validation and HTTP errors as the failure envelope."""

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
        logger.info("Rejected %s %s: %s", request.method, request.url.path, "; ".join(problems))
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request",
            "; ".join(problems) or None,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        headers = getattr(exc, "headers", None)
        detail = exc.detail
        if isinstance(detail, dict):
            response = error_response(exc.status_code, detail.get("error", ""), detail.get("message"))
        else:
            response = error_response(exc.status_code, str(detail))
        if headers:
            response.headers.update(headers)
        return response
