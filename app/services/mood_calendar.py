"""
Mood calendar aggregator: month of diary samples → 42-cell grid + colour shares.

Grid
----
Always 6 weeks x 7 days, Monday first. Cell `i` shows
`day_number = i - first_weekday_offset + 1`; cells outside
`1..days_in_month` are padding (None). The worst case (offset 6, 31 days)
still fits in 42 cells.

Buckets
-------
  mood 1, 2 → red
  mood 3    → yellow
  mood 4, 5 → green
  no sample → none

Percentages
-----------
Denominator is the month's real day count, never 42. red/yellow/green are
rounded independently (half up); `none` absorbs the residual so the four
shares add up to 100.

Public API
----------
build_grid(year, month_index, samples)    -> MonthGrid
bucket_percentages(grid, days_in_month)   -> BucketPercentages
samples_from_entries(entries)             -> dict[str, int]
MonthCursor                               -> month navigation
"""
from __future__ import annotations

import calendar
import enum
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Mapping, Optional

from app.schemas.portal import MoodEntry
from app.services.score_classifier import round_half_up

GRID_CELLS = 42

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class ColorBucket(str, enum.Enum):
    red = "red"
    yellow = "yellow"
    green = "green"
    none = "none"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GridCell:
    day_number: int
    mood: Optional[int]
    bucket: ColorBucket


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month_index: int            # 0 = January
    days_in_month: int
    first_weekday_offset: int   # 0 = Monday
    cells: list[Optional[GridCell]]

    def days(self) -> list[GridCell]:
        """Populated cells only, in day order."""
        return [c for c in self.cells if c is not None]


@dataclass(frozen=True)
class BucketPercentages:
    red: int
    yellow: int
    green: int
    none: int


# ---------------------------------------------------------------------------
# Calendar arithmetic
# ---------------------------------------------------------------------------

def days_in_month(year: int, month_index: int) -> int:
    return calendar.monthrange(year, month_index + 1)[1]


def first_weekday_offset(year: int, month_index: int) -> int:
    # date.weekday() is already Monday = 0 … Sunday = 6
    return date(year, month_index + 1, 1).weekday()


def date_key(year: int, month_index: int, day: int) -> str:
    return f"{year:04d}-{month_index + 1:02d}-{day:02d}"


def mood_bucket(mood: Optional[int]) -> ColorBucket:
    if not mood:
        return ColorBucket.none
    if mood <= 2:
        return ColorBucket.red
    if mood == 3:
        return ColorBucket.yellow
    return ColorBucket.green


def samples_from_entries(entries: Iterable[MoodEntry]) -> dict[str, int]:
    """Index diary entries by ISO date. Later entries overwrite earlier ones."""
    samples: dict[str, int] = {}
    for entry in entries:
        samples[entry.date.isoformat()] = entry.mood
    return samples


# ---------------------------------------------------------------------------
# Public: grid + percentages
# ---------------------------------------------------------------------------

def build_grid(year: int, month_index: int, samples: Mapping[str, int]) -> MonthGrid:
    total_days = days_in_month(year, month_index)
    offset = first_weekday_offset(year, month_index)

    cells: list[Optional[GridCell]] = []
    for i in range(GRID_CELLS):
        day_number = i - offset + 1
        if day_number < 1 or day_number > total_days:
            cells.append(None)
            continue
        mood = samples.get(date_key(year, month_index, day_number))
        cells.append(GridCell(day_number=day_number, mood=mood, bucket=mood_bucket(mood)))

    return MonthGrid(
        year=year,
        month_index=month_index,
        days_in_month=total_days,
        first_weekday_offset=offset,
        cells=cells,
    )


def bucket_percentages(grid: MonthGrid, days_in_month: int) -> BucketPercentages:
    counts = {bucket: 0 for bucket in ColorBucket}
    for cell in grid.days():
        counts[cell.bucket] += 1

    total = days_in_month or 1
    shares = {
        bucket: round_half_up(counts[bucket] * 100, total)
        for bucket in (ColorBucket.red, ColorBucket.yellow, ColorBucket.green)
    }

    # Independent rounding can overshoot 100 on a fully logged month
    # (e.g. 2/2/26 of 30 → 7+7+87); take the excess off the largest share.
    excess = sum(shares.values()) - 100
    if excess > 0:
        largest = max(shares, key=lambda b: shares[b])
        shares[largest] -= excess

    colored = sum(shares.values())
    return BucketPercentages(
        red=shares[ColorBucket.red],
        yellow=shares[ColorBucket.yellow],
        green=shares[ColorBucket.green],
        none=max(0, 100 - colored),
    )


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthCursor:
    year: int
    month_index: int  # 0 = January

    @classmethod
    def today(cls) -> "MonthCursor":
        now = datetime.now(tz=timezone.utc)
        return cls(year=now.year, month_index=now.month - 1)

    @classmethod
    def from_query(cls, year: Optional[int], month: Optional[int]) -> "MonthCursor":
        """Build from a 1-based month; missing parts default to the current month."""
        current = cls.today()
        return cls(
            year=year if year is not None else current.year,
            month_index=month - 1 if month is not None else current.month_index,
        )

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month_index)

    @property
    def month(self) -> int:
        return self.month_index + 1

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month_index]

    def go_prev(self) -> "MonthCursor":
        if self.month_index == 0:
            return MonthCursor(year=self.year - 1, month_index=11)
        return MonthCursor(year=self.year, month_index=self.month_index - 1)

    def go_next(self) -> "MonthCursor":
        if self.month_index == 11:
            return MonthCursor(year=self.year + 1, month_index=0)
        return MonthCursor(year=self.year, month_index=self.month_index + 1)
