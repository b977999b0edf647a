"""
Dashboard router: wellbeing view model for the rendering layer.

GET /dashboard            burnout card + mood calendar for one month
GET /dashboard/burnout    burnout card only
GET /dashboard/calendar   mood calendar only
"""
from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.clients.portal_api import PortalAPIClient, get_portal_client
from app.core.session import SessionContext, get_session_context
from app.schemas.common import ErrorResponse
from app.schemas.dashboard import (
    BucketPercentagesOut,
    BurnoutCardResponse,
    CalendarCardResponse,
    CalendarCellOut,
    DashboardResponse,
    DomainBreakdownOut,
    DomainScoreOut,
    LatestTestOut,
    MonthRef,
    NavigationOut,
    RecommendationOut,
    SourceStateOut,
)
from app.services.dashboard import DashboardView
from app.services.dashboard_session import DashboardSession, Navigation
from app.services.fetch_state import SourceState
from app.services.mood_calendar import WEEKDAY_NAMES, MonthCursor
from app.services.score_classifier import classify_total, level_label

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _state_to_response(state: SourceState) -> SourceStateOut:
    return SourceStateOut(status=state.status.value, error=state.error)


def _month_ref(cursor: MonthCursor) -> MonthRef:
    return MonthRef(
        year=cursor.year,
        month_index=cursor.month_index,
        month=cursor.month,
        month_name=cursor.name,
    )


def _burnout_to_response(session: DashboardSession, view: DashboardView) -> BurnoutCardResponse:
    breakdown = None
    if view.domain_breakdown is not None:
        breakdown = DomainBreakdownOut(**{
            domain.value: DomainScoreOut(
                score=ds.score,
                max_score=ds.max_score,
                level=ds.level.value,
                fill=ds.fill,
            )
            for domain, ds in view.domain_breakdown.items()
        })

    latest = None
    if view.latest_test is not None:
        test_level = classify_total(view.latest_test.total_score)
        latest = LatestTestOut(
            created_at=view.latest_test.created_at.isoformat(),
            total_score=view.latest_test.total_score,
            level=test_level.value,
            level_label=level_label(test_level),
            comment_work=view.latest_test.comment_work,
            comment_factors=view.latest_test.comment_factors,
        )

    return BurnoutCardResponse(
        effective_score=view.effective_score,
        level=view.level.value if view.level is not None else None,
        level_label=view.level_label,
        tone=view.tone,
        domain_breakdown=breakdown,
        latest_test=latest,
        recommendation=RecommendationOut(
            summary=view.recommendation.summary,
            actions=list(view.recommendation.actions),
        ),
        test_state=_state_to_response(session.test),
        user_state=_state_to_response(session.user),
    )


def _calendar_to_response(
    session: DashboardSession, view: DashboardView, nav: Navigation
) -> CalendarCardResponse:
    grid = view.grid
    return CalendarCardResponse(
        days_in_month=grid.days_in_month,
        first_weekday_offset=grid.first_weekday_offset,
        weekdays=list(WEEKDAY_NAMES),
        grid=[
            None if cell is None else CalendarCellOut(
                day_number=cell.day_number,
                mood=cell.mood,
                bucket=cell.bucket.value,
            )
            for cell in grid.cells
        ],
        percentages=BucketPercentagesOut.model_validate(view.percentages),
        navigation=NavigationOut(
            year=nav.current.year,
            month_index=nav.current.month_index,
            month_name=nav.current.name,
            prev=_month_ref(nav.prev),
            next=_month_ref(nav.next),
        ),
        diary_state=_state_to_response(session.diary),
    )


def _session(
    portal: PortalAPIClient, ctx: SessionContext, year: Optional[int], month: Optional[int]
) -> DashboardSession:
    return DashboardSession(portal, ctx, cursor=MonthCursor.from_query(year, month))


_YEAR = Query(
    default=None, ge=1, le=9999,
    description="Calendar year. Defaults to the current year (UTC).",
    examples=[2025],
)
_MONTH = Query(
    default=None, ge=1, le=12,
    description="1-based month. Defaults to the current month (UTC).",
    examples=[11],
)


# ---------------------------------------------------------------------------
# GET /dashboard
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=DashboardResponse,
    summary="Full wellbeing dashboard for one month",
    responses={
        200: {"description": "Burnout card and mood calendar."},
        401: {"model": ErrorResponse, "description": "Session missing or expired upstream."},
        422: {"model": ErrorResponse, "description": "Invalid year or month."},
    },
)
async def dashboard(
    year: Optional[int] = _YEAR,
    month: Optional[int] = _MONTH,
    portal: PortalAPIClient = Depends(get_portal_client),
    ctx: SessionContext = Depends(get_session_context),
):
    """
    Fetch the user record, the latest burnout test and the diary month in
    parallel, then compose the dashboard.

    Missing data (no test yet, empty month) is reported as `not_found` in the
    matching `*_state`; upstream failures as `failed` with a retryable
    message. Neither turns into an HTTP error.
    """
    session = _session(portal, ctx, year, month)
    await session.mount()
    snap = session.snapshot()
    return DashboardResponse(
        burnout=_burnout_to_response(session, snap.view),
        calendar=_calendar_to_response(session, snap.view, snap.navigation),
    )


# ---------------------------------------------------------------------------
# GET /dashboard/burnout
# ---------------------------------------------------------------------------

@router.get(
    "/burnout",
    response_model=BurnoutCardResponse,
    summary="Burnout level card",
    responses={401: {"model": ErrorResponse, "description": "Session missing or expired upstream."}},
)
async def dashboard_burnout(
    portal: PortalAPIClient = Depends(get_portal_client),
    ctx: SessionContext = Depends(get_session_context),
):
    """
    Effective score (persisted score first, then latest test), level,
    per-domain breakdown and recommendation.
    """
    session = DashboardSession(portal, ctx)
    await asyncio.gather(session.refresh_user(), session.refresh_test())
    return _burnout_to_response(session, session.view())


# ---------------------------------------------------------------------------
# GET /dashboard/calendar
# ---------------------------------------------------------------------------

@router.get(
    "/calendar",
    response_model=CalendarCardResponse,
    summary="Mood diary calendar for one month",
    responses={
        401: {"model": ErrorResponse, "description": "Session missing or expired upstream."},
        422: {"model": ErrorResponse, "description": "Invalid year or month."},
    },
)
async def dashboard_calendar(
    year: Optional[int] = _YEAR,
    month: Optional[int] = _MONTH,
    portal: PortalAPIClient = Depends(get_portal_client),
    ctx: SessionContext = Depends(get_session_context),
):
    """
    42-cell Monday-first grid with per-day colour buckets, colour shares over
    the month's real day count and prev/next month references.
    """
    session = _session(portal, ctx, year, month)
    await session.refresh_diary()
    snap = session.snapshot()
    return _calendar_to_response(session, snap.view, snap.navigation)
