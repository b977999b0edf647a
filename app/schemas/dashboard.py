"""
Dashboard response schemas.

GET /dashboard           → DashboardResponse
GET /dashboard/burnout   → BurnoutCardResponse
GET /dashboard/calendar  → CalendarCardResponse
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceStateOut(BaseModel):
    """State of one upstream data source."""
    status: str = Field(
        description='"idle" | "loading" | "loaded" | "not_found" | "failed"'
    )
    error: Optional[str] = Field(
        default=None,
        description="Retryable error message, set only when status is failed.",
    )


class DomainScoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    score: int
    max_score: int
    level: str = Field(description='"low" | "medium" | "high" | "very_high"')
    fill: int = Field(description="Bar width in percent, 0..100.")


class DomainBreakdownOut(BaseModel):
    physical: DomainScoreOut
    emotional: DomainScoreOut
    cognitive: DomainScoreOut


class RecommendationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    summary: str
    actions: list[str]


class LatestTestOut(BaseModel):
    created_at: str
    total_score: int
    level: str
    level_label: str
    comment_work: Optional[str] = None
    comment_factors: Optional[str] = None


class BurnoutCardResponse(BaseModel):
    effective_score: Optional[int] = Field(
        description="Persisted score, else latest test total, else null (no data)."
    )
    level: Optional[str] = Field(
        default=None, description='"low" | "medium" | "high" | "very_high" | null'
    )
    level_label: str = Field(examples=["Medium burnout level"])
    tone: str = Field(description='"green" | "yellow" | "orange" | "red" | "gray"')
    domain_breakdown: Optional[DomainBreakdownOut] = Field(
        default=None, description="Present only when a latest test exists."
    )
    latest_test: Optional[LatestTestOut] = None
    recommendation: RecommendationOut
    test_state: SourceStateOut
    user_state: SourceStateOut


class CalendarCellOut(BaseModel):
    day_number: int
    mood: Optional[int] = None
    bucket: str = Field(description='"red" | "yellow" | "green" | "none"')


class BucketPercentagesOut(BaseModel):
    """Colour shares over the month's real day count. Always sums to 100."""
    model_config = ConfigDict(from_attributes=True)

    red: int
    yellow: int
    green: int
    none: int


class MonthRef(BaseModel):
    year: int
    month_index: int = Field(description="0 = January.")
    month: int = Field(description="1-based month, as accepted by ?month=.")
    month_name: str


class NavigationOut(BaseModel):
    year: int
    month_index: int
    month_name: str
    prev: MonthRef
    next: MonthRef


class CalendarCardResponse(BaseModel):
    days_in_month: int
    first_weekday_offset: int = Field(description="0 = Monday.")
    weekdays: list[str]
    grid: list[Optional[CalendarCellOut]] = Field(
        description="Exactly 42 cells, Monday first; null is padding."
    )
    percentages: BucketPercentagesOut
    navigation: NavigationOut
    diary_state: SourceStateOut


class DashboardResponse(BaseModel):
    burnout: BurnoutCardResponse
    calendar: CalendarCardResponse
