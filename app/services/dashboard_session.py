"""
Dashboard session: one rendered dashboard and its three data sources.

Sources (independent, fetched concurrently on mount)
----------------------------------------------------
  user   : GET /users/me            → persisted burn_out_score
  test   : GET /burnout-tests/last  → latest test (404 = no test yet)
  diary  : GET /diary?year&month    → mood entries (404 = empty month)

Stale-response guard
--------------------
Every diary fetch is keyed by the (year, month_index) it was requested for.
When it resolves, the result is applied only if that key still equals the
displayed month; otherwise it is dropped. Navigating quickly therefore can
never leave an older month's grid on screen.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from app.core.session import SessionContext
from app.schemas.portal import BurnoutTestResult, MoodEntry, UserRecord
from app.services.dashboard import DashboardView, compose
from app.services.fetch_state import SourceState, load_into
from app.services.mood_calendar import MonthCursor, build_grid, samples_from_entries

logger = logging.getLogger(__name__)

TEST_FAILURE_MESSAGE = "Could not load the latest test result."
DIARY_FAILURE_MESSAGE = "Could not load the mood diary."
USER_FAILURE_MESSAGE = "Could not load the user record."


class PortalSource(Protocol):
    async def get_current_user(self, ctx: SessionContext) -> UserRecord: ...

    async def get_last_burnout_test(self, ctx: SessionContext) -> BurnoutTestResult: ...

    async def get_diary_month(
        self, ctx: SessionContext, year: int, month: int
    ) -> list[MoodEntry]: ...


@dataclass(frozen=True)
class Navigation:
    current: MonthCursor
    prev: MonthCursor
    next: MonthCursor


@dataclass(frozen=True)
class SessionSnapshot:
    view: DashboardView
    navigation: Navigation
    user: SourceState
    test: SourceState
    diary: SourceState


class DashboardSession:
    def __init__(
        self,
        portal: PortalSource,
        ctx: SessionContext,
        cursor: Optional[MonthCursor] = None,
    ):
        self.portal = portal
        self.ctx = ctx
        self.cursor = cursor or MonthCursor.today()
        self.user = SourceState()
        self.test = SourceState()
        self.diary = SourceState()

    # ------------------------------------------------------------------
    # Fetches
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        await asyncio.gather(
            self.refresh_user(),
            self.refresh_test(),
            self.refresh_diary(),
        )

    async def refresh_user(self) -> None:
        await load_into(
            self.user,
            lambda: self.portal.get_current_user(self.ctx),
            failure_message=USER_FAILURE_MESSAGE,
        )

    async def refresh_test(self) -> None:
        await load_into(
            self.test,
            lambda: self.portal.get_last_burnout_test(self.ctx),
            failure_message=TEST_FAILURE_MESSAGE,
        )

    async def refresh_diary(self) -> bool:
        """Returns False if the response arrived for a month no longer displayed."""
        requested = self.cursor
        applied = await load_into(
            self.diary,
            lambda: self._fetch_samples(requested),
            key=requested.key,
            is_current=lambda: self.cursor.key == requested.key,
            empty={},
            failure_message=DIARY_FAILURE_MESSAGE,
        )
        if not applied:
            logger.info(
                "Dropped diary response for %04d-%02d; now showing %04d-%02d",
                requested.year, requested.month, self.cursor.year, self.cursor.month,
            )
        return applied

    async def _fetch_samples(self, cursor: MonthCursor) -> dict[str, int]:
        entries = await self.portal.get_diary_month(self.ctx, cursor.year, cursor.month)
        return samples_from_entries(entries)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def go_prev(self) -> bool:
        self.cursor = self.cursor.go_prev()
        return await self.refresh_diary()

    async def go_next(self) -> bool:
        self.cursor = self.cursor.go_next()
        return await self.refresh_diary()

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    @property
    def persisted_score(self) -> Optional[int]:
        user: Optional[UserRecord] = self.user.data
        return user.burn_out_score if user is not None else None

    @property
    def latest_test(self) -> Optional[BurnoutTestResult]:
        return self.test.data

    def samples(self) -> dict[str, int]:
        # A failed refresh keeps the previous month's data; never mix it in.
        if self.diary.data_key != self.cursor.key:
            return {}
        return self.diary.data or {}

    def view(self) -> DashboardView:
        grid = build_grid(self.cursor.year, self.cursor.month_index, self.samples())
        return compose(self.persisted_score, self.latest_test, grid)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            view=self.view(),
            navigation=Navigation(
                current=self.cursor,
                prev=self.cursor.go_prev(),
                next=self.cursor.go_next(),
            ),
            user=self.user,
            test=self.test,
            diary=self.diary,
        )
