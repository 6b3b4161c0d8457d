"""
Error taxonomy and exception handlers.

Every error leaves the service as ``{"error", "statusCode", "message"}`` so
clients can rely on one shape regardless of which layer raised it.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

TOKEN_COOKIE_NAME = "token"


class APIError(HTTPException):
    """Base API error with consistent structure"""

    error = "Error"
    default_message = "Request failed"

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        error: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        message = message or self.default_message
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.message = message
        if error:
            self.error = error

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "statusCode": self.status_code, "message": self.message}


class ValidationError(APIError):
    """Malformed or missing request fields"""

    error = "Bad request"
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, issues: Optional[List[Dict[str, str]]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)
        self.issues = issues or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.issues:
            body["issues"] = self.issues
        return body


class Unauthorized(APIError):
    error = "Unauthorized"
    default_message = "Token is missing"

    def __init__(self, message: Optional[str] = None):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message)


class InvalidToken(APIError):
    """Bad or expired session token. The handler clears the cookie."""

    error = "Bad request"
    default_message = "JWT token is invalid"

    def __init__(self, message: Optional[str] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)


class NotFound(APIError):
    error = "Not found"
    default_message = "Resource not found"

    def __init__(self, message: Optional[str] = None):
        super().__init__(status.HTTP_404_NOT_FOUND, message)


class Forbidden(APIError):
    error = "Forbidden"
    default_message = "Permission denied"

    def __init__(self, message: Optional[str] = None):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


def _field_name(loc: Any) -> str:
    parts = [str(p) for p in (loc or ()) if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    response = JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)
    if isinstance(exc, InvalidToken):
        response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return response


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Convert FastAPI body/path validation failures to a 400 with field detail"""
    issues = [
        {"field": _field_name(err.get("loc")), "message": str(err.get("msg") or "Invalid value")}
        for err in exc.errors()
    ]
    return await handle_api_error(request, ValidationError("Invalid request data", issues=issues))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the same shape as APIError"""
    try:
        reason = HTTPStatus(exc.status_code).phrase
    except ValueError:
        reason = "Error"
    message = exc.detail if isinstance(exc.detail, str) else reason
    return await handle_api_error(request, APIError(exc.status_code, message, error=reason, headers=exc.headers))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
