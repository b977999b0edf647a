"""
Explicit session context.

The portal's session token lives in a cookie (or a bearer header for API
callers). It is read once per request and handed to every upstream fetch as a
plain value, so nothing below the router touches request state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from app.core.config import settings


@dataclass(frozen=True)
class SessionContext:
    token: Optional[str] = None

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


def get_session_context(request: Request) -> SessionContext:
    """Bearer header wins over the session cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return SessionContext(token=credentials.strip())
    return SessionContext(token=request.cookies.get(settings.SESSION_COOKIE_NAME) or None)
