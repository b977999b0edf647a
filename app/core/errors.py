"""
Custom exception hierarchy for the wellbeing dashboard service.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

Upstream "not found" and "unavailable" errors are normally captured by the
per-source state machine and never reach these handlers; only
authentication failures are expected to surface as HTTP errors.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class WellbeingException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UpstreamNotFoundError(WellbeingException):
    """The portal API has no data for the resource (no test yet, empty month)."""
    http_status = status.HTTP_404_NOT_FOUND
    code = "UPSTREAM_NOT_FOUND"

    def __init__(self, path: str):
        super().__init__(
            message=f"Portal API has no data at {path}.",
            details={"path": path},
        )


class UpstreamUnavailableError(WellbeingException):
    """Transport or server failure talking to the portal API. Retry-eligible."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, path: str, reason: str, upstream_status: int | None = None):
        details: dict[str, Any] = {"path": path, "reason": reason}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        super().__init__(
            message=f"Portal API request to {path} failed: {reason}",
            details=details,
        )


class UpstreamAuthError(WellbeingException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UPSTREAM_UNAUTHORIZED"

    def __init__(self, path: str, upstream_status: int):
        super().__init__(
            message="Session is missing or expired.",
            details={"path": path, "upstream_status": upstream_status},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def wellbeing_exception_handler(
    request: Request, exc: WellbeingException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(
                str(loc) for loc in error["loc"] if loc not in ("body", "query")
            ),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
