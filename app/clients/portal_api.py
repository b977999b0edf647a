"""
Async client for the HR portal API.

Every call takes the caller's SessionContext explicitly; the client itself
holds no per-user state and can be shared across requests.

Status mapping
--------------
  404            → UpstreamNotFoundError   (no data yet, not an error)
  401 / 403      → UpstreamAuthError
  other >= 400   → UpstreamUnavailableError
  transport/JSON → UpstreamUnavailableError
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.core.errors import (
    UpstreamAuthError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from app.core.session import SessionContext
from app.schemas.portal import BurnoutTestResult, MoodEntry, UserRecord

logger = logging.getLogger(__name__)

_MOOD_ENTRIES = TypeAdapter(list[MoodEntry])


class PortalAPIClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.PORTAL_API_URL,
            timeout=timeout if timeout is not None else settings.PORTAL_API_TIMEOUT,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "PortalAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_current_user(self, ctx: SessionContext) -> UserRecord:
        payload = await self._get_json("/users/me", ctx)
        return self._parse("/users/me", lambda: UserRecord.model_validate(payload))

    async def get_last_burnout_test(self, ctx: SessionContext) -> BurnoutTestResult:
        payload = await self._get_json("/burnout-tests/last", ctx)
        return self._parse(
            "/burnout-tests/last", lambda: BurnoutTestResult.model_validate(payload)
        )

    async def get_diary_month(
        self, ctx: SessionContext, year: int, month: int
    ) -> list[MoodEntry]:
        """`month` is 1-based, as the diary API expects."""
        payload = await self._get_json("/diary", ctx, params={"year": year, "month": month})
        return self._parse("/diary", lambda: _MOOD_ENTRIES.validate_python(payload))

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _get_json(
        self,
        path: str,
        ctx: SessionContext,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self._http.get(path, params=params, headers=ctx.auth_headers())
        except httpx.TimeoutException as exc:
            logger.warning("Portal API timeout on %s: %s", path, exc)
            raise UpstreamUnavailableError(path, reason="timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("Portal API transport error on %s: %s", path, exc)
            raise UpstreamUnavailableError(path, reason="transport error") from exc

        if response.status_code == 404:
            raise UpstreamNotFoundError(path)
        if response.status_code in (401, 403):
            raise UpstreamAuthError(path, upstream_status=response.status_code)
        if response.status_code >= 400:
            logger.warning("Portal API returned %s on %s", response.status_code, path)
            raise UpstreamUnavailableError(
                path,
                reason=f"HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Portal API sent malformed JSON on %s", path)
            raise UpstreamUnavailableError(path, reason="malformed JSON") from exc

    @staticmethod
    def _parse(path: str, build):
        try:
            return build()
        except ValidationError as exc:
            logger.warning("Portal API payload on %s did not validate: %s", path, exc)
            raise UpstreamUnavailableError(path, reason="unexpected payload") from exc


async def get_portal_client():
    client = PortalAPIClient()
    try:
        yield client
    finally:
        await client.aclose()
