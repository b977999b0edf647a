"""
Tests for the portal API client against httpx.MockTransport.
"""
import asyncio
import json

import httpx
import pytest

from app.clients.portal_api import PortalAPIClient
from app.core.errors import (
    UpstreamAuthError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from app.core.session import SessionContext

BASE_URL = "http://portal.test/api"

TEST_PAYLOAD = {
    "id": 3,
    "created_at": "2025-11-10T09:30:00Z",
    "physical_score": 6,
    "emotional_score": 12,
    "cognitive_score": 14,
    "total_score": 32,
    "comment_work": "Too many meetings",
    "comment_factors": None,
}


def _call(handler, method, *args, ctx=SessionContext(token="tok")):
    async def run():
        client = PortalAPIClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            return await getattr(client, method)(ctx, *args)
    return asyncio.run(run())


class TestRequests:
    def test_bearer_token_and_path(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=TEST_PAYLOAD)

        result = _call(handler, "get_last_burnout_test")
        assert seen["url"] == "http://portal.test/api/burnout-tests/last"
        assert seen["auth"] == "Bearer tok"
        assert result.total_score == 32
        assert result.comment_work == "Too many meetings"

    def test_no_token_sends_no_authorization(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"id": 1})

        _call(handler, "get_current_user", ctx=SessionContext())
        assert seen["auth"] is None

    def test_diary_query_params(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=[
                {"id": 1, "date": "2025-11-15", "mood": 2, "note": None},
                {"id": 2, "date": "2025-11-16T00:00:00", "mood": 4},
            ])

        entries = _call(handler, "get_diary_month", 2025, 11)
        assert seen["params"] == {"year": "2025", "month": "11"}
        assert [(e.date.isoformat(), e.mood) for e in entries] == [
            ("2025-11-15", 2),
            ("2025-11-16", 4),
        ]

    def test_user_record_ignores_unknown_fields(self):
        def handler(request):
            return httpx.Response(200, json={
                "id": 9, "role": "admin", "burn_out_score": 0, "email": "a@b.c",
            })

        user = _call(handler, "get_current_user")
        assert user.burn_out_score == 0
        assert user.role == "admin"

    def test_missing_burn_out_score_is_none(self):
        user = _call(lambda r: httpx.Response(200, json={"id": 9}), "get_current_user")
        assert user.burn_out_score is None


class TestStatusMapping:
    def test_404_is_not_found(self):
        with pytest.raises(UpstreamNotFoundError) as exc:
            _call(lambda r: httpx.Response(404), "get_last_burnout_test")
        assert exc.value.details["path"] == "/burnout-tests/last"

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses(self, status):
        with pytest.raises(UpstreamAuthError) as exc:
            _call(lambda r: httpx.Response(status), "get_current_user")
        assert exc.value.details["upstream_status"] == status

    @pytest.mark.parametrize("status", [400, 500, 503])
    def test_other_errors_are_unavailable(self, status):
        with pytest.raises(UpstreamUnavailableError) as exc:
            _call(lambda r: httpx.Response(status), "get_diary_month", 2025, 11)
        assert exc.value.details["upstream_status"] == status

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamUnavailableError) as exc:
            _call(handler, "get_last_burnout_test")
        assert exc.value.details["reason"] == "transport error"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(UpstreamUnavailableError) as exc:
            _call(handler, "get_last_burnout_test")
        assert exc.value.details["reason"] == "timeout"

    def test_malformed_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(UpstreamUnavailableError) as exc:
            _call(handler, "get_current_user")
        assert exc.value.details["reason"] == "malformed JSON"

    def test_unexpected_payload(self):
        def handler(request):
            return httpx.Response(200, content=json.dumps({"total_score": "lots"}))

        with pytest.raises(UpstreamUnavailableError) as exc:
            _call(handler, "get_last_burnout_test")
        assert exc.value.details["reason"] == "unexpected payload"
