"""
Per-source fetch state machine.

    idle ──begin──▶ loading ──resolve──────▶ loaded
      ▲                │     ──mark_not_found─▶ not_found
      │                │     ──fail──────────▶ failed
      └── begin() from any terminal state goes back to loading

`not_found` is a normal empty state ("no data yet"); `failed` is a retryable
error and keeps whatever data the last successful load produced.

load_into() is the only place upstream errors are caught: NotFound and
NetworkFailure become state, never exceptions crossing into the view.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Hashable, Optional

from app.core.errors import UpstreamNotFoundError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class FetchStatus(str, enum.Enum):
    idle = "idle"
    loading = "loading"
    loaded = "loaded"
    not_found = "not_found"
    failed = "failed"


@dataclass
class SourceState:
    status: FetchStatus = FetchStatus.idle
    data: Any = None
    error: Optional[str] = None
    key: Optional[Hashable] = None        # key of the latest request
    data_key: Optional[Hashable] = None   # key the current data belongs to

    def begin(self, key: Optional[Hashable] = None) -> None:
        self.status = FetchStatus.loading
        self.error = None
        self.key = key

    def resolve(self, data: Any) -> None:
        self.status = FetchStatus.loaded
        self.data = data
        self.data_key = self.key
        self.error = None

    def mark_not_found(self, empty: Any = None) -> None:
        self.status = FetchStatus.not_found
        self.data = empty
        self.data_key = self.key
        self.error = None

    def fail(self, message: str) -> None:
        self.status = FetchStatus.failed
        self.error = message

    @property
    def is_terminal(self) -> bool:
        return self.status in (FetchStatus.loaded, FetchStatus.not_found, FetchStatus.failed)


async def load_into(
    state: SourceState,
    fetch: Callable[[], Awaitable[Any]],
    *,
    key: Optional[Hashable] = None,
    is_current: Optional[Callable[[], bool]] = None,
    empty: Any = None,
    failure_message: str = "Could not load data.",
) -> bool:
    """
    Run one fetch and move `state` to its terminal status.

    Returns False when the response was discarded because `is_current()`
    reported that the request is no longer the one being displayed.
    """
    state.begin(key)
    try:
        data = await fetch()
    except UpstreamNotFoundError:
        if is_current is not None and not is_current():
            return False
        state.mark_not_found(empty)
        return True
    except UpstreamUnavailableError as exc:
        if is_current is not None and not is_current():
            return False
        logger.warning("Fetch for %r failed: %s", key, exc.message)
        state.fail(failure_message)
        return True

    if is_current is not None and not is_current():
        logger.debug("Discarding stale response for %r", key)
        return False
    state.resolve(data)
    return True
