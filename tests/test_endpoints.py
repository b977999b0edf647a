"""
HTTP tests for the dashboard endpoints (portal API faked via conftest).
"""
from app.core.errors import UpstreamNotFoundError, UpstreamUnavailableError
from app.schemas.portal import UserRecord
from tests.fakes import make_entries, make_test_result


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


class TestDashboard:
    def test_full_dashboard(self, client, portal):
        portal.user = UserRecord(id=1, burn_out_score=10)
        portal.test = make_test_result(total=40, physical=4, emotional=19, cognitive=12)
        portal.diary = {(2025, 11): make_entries(2025, 11, {15: 1})}

        r = client.get("/dashboard?year=2025&month=11")
        assert r.status_code == 200
        body = r.json()

        burnout = body["burnout"]
        assert burnout["effective_score"] == 10
        assert burnout["level"] == "low"
        assert burnout["tone"] == "green"
        assert burnout["latest_test"]["total_score"] == 40
        assert burnout["latest_test"]["level"] == "high"
        assert burnout["domain_breakdown"]["physical"] == {
            "score": 4, "max_score": 16, "level": "low", "fill": 25,
        }
        assert burnout["domain_breakdown"]["emotional"]["level"] == "very_high"
        assert burnout["test_state"] == {"status": "loaded", "error": None}

        calendar = body["calendar"]
        assert len(calendar["grid"]) == 42
        assert calendar["days_in_month"] == 30
        assert calendar["first_weekday_offset"] == 5
        assert calendar["grid"][:5] == [None] * 5
        day15 = calendar["grid"][5 + 14]
        assert day15 == {"day_number": 15, "mood": 1, "bucket": "red"}
        assert calendar["percentages"] == {"red": 3, "yellow": 0, "green": 0, "none": 97}
        assert calendar["weekdays"][0] == "Mon"
        assert calendar["diary_state"]["status"] == "loaded"

    def test_navigation_wraps_year(self, client):
        nav = client.get("/dashboard?year=2025&month=12").json()["calendar"]["navigation"]
        assert (nav["year"], nav["month_index"], nav["month_name"]) == (2025, 11, "December")
        assert nav["next"] == {"year": 2026, "month_index": 0, "month": 1, "month_name": "January"}
        assert nav["prev"]["month"] == 11

        nav = client.get("/dashboard?year=2025&month=1").json()["calendar"]["navigation"]
        assert nav["prev"] == {"year": 2024, "month_index": 11, "month": 12, "month_name": "December"}

    def test_no_data_anywhere(self, client, portal):
        portal.diary = {(2025, 11): UpstreamNotFoundError("/diary")}
        body = client.get("/dashboard?year=2025&month=11").json()

        burnout = body["burnout"]
        assert burnout["effective_score"] is None
        assert burnout["level"] is None
        assert burnout["level_label"] == "No data"
        assert burnout["domain_breakdown"] is None
        assert burnout["latest_test"] is None
        assert burnout["test_state"] == {"status": "not_found", "error": None}
        assert "survey" in burnout["recommendation"]["summary"]

        calendar = body["calendar"]
        assert calendar["diary_state"]["status"] == "not_found"
        assert calendar["percentages"]["none"] == 100

    def test_upstream_failure_is_reported_not_raised(self, client, portal):
        portal.test = UpstreamUnavailableError("/burnout-tests/last", reason="HTTP 500")
        portal.diary = {(2025, 11): UpstreamUnavailableError("/diary", reason="timeout")}

        r = client.get("/dashboard?year=2025&month=11")
        assert r.status_code == 200
        body = r.json()
        assert body["burnout"]["test_state"]["status"] == "failed"
        assert body["burnout"]["test_state"]["error"]
        assert body["calendar"]["diary_state"]["status"] == "failed"
        assert body["calendar"]["diary_state"]["error"]

    def test_session_token_from_cookie_and_header(self, client, portal):
        client.cookies.set("_token", "cookie-token")
        client.get("/dashboard?year=2025&month=11")
        assert {ctx.token for ctx in portal.contexts} == {"cookie-token"}

        portal.contexts.clear()
        client.get(
            "/dashboard?year=2025&month=11",
            headers={"Authorization": "Bearer header-token"},
        )
        assert {ctx.token for ctx in portal.contexts} == {"header-token"}

    def test_defaults_to_current_month(self, client, portal):
        from app.services.mood_calendar import MonthCursor
        today = MonthCursor.today()
        nav = client.get("/dashboard").json()["calendar"]["navigation"]
        assert (nav["year"], nav["month_index"]) == today.key
        assert ("diary", today.year, today.month) in portal.calls


class TestBurnoutCard:
    def test_latest_test_only(self, client, portal):
        portal.test = make_test_result(total=33)
        r = client.get("/dashboard/burnout")
        assert r.status_code == 200
        body = r.json()
        assert body["effective_score"] == 33
        assert body["level"] == "high"
        assert body["level_label"] == "High burnout level"
        assert len(body["recommendation"]["actions"]) == 4
        assert not any(call[0] == "diary" for call in portal.calls)

    def test_persisted_only_has_no_breakdown(self, client, portal):
        portal.user = UserRecord(id=1, burn_out_score=49)
        body = client.get("/dashboard/burnout").json()
        assert body["level"] == "very_high"
        assert body["tone"] == "red"
        assert body["domain_breakdown"] is None


class TestCalendarCard:
    def test_calendar_only(self, client, portal):
        portal.diary = {(2024, 2): make_entries(2024, 2, {29: 3})}
        r = client.get("/dashboard/calendar?year=2024&month=2")
        assert r.status_code == 200
        body = r.json()
        assert body["days_in_month"] == 29
        assert body["first_weekday_offset"] == 3
        cells = [c for c in body["grid"] if c is not None]
        assert len(cells) == 29
        assert cells[-1] == {"day_number": 29, "mood": 3, "bucket": "yellow"}
        assert sum(body["percentages"].values()) == 100
        assert portal.calls == [("diary", 2024, 2)]
