"""
Upstream payload schemas: what the portal API returns.

GET /users/me            → UserRecord
GET /burnout-tests/last  → BurnoutTestResult
GET /diary               → list[MoodEntry]
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserRecord(BaseModel):
    """Subset of the portal user record consumed by the dashboard."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    role: Optional[str] = None
    burn_out_score: Optional[int] = Field(
        default=None,
        description="Persisted burnout score. Takes precedence over the latest test.",
    )


class BurnoutTestResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    created_at: dt.datetime
    physical_score: int = Field(description="0..16")
    emotional_score: int = Field(description="0..24")
    cognitive_score: int = Field(description="0..24")
    total_score: int = Field(description="0..64")
    comment_work: Optional[str] = None
    comment_factors: Optional[str] = None


class MoodEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    date: dt.date
    mood: int = Field(description="Self-reported wellbeing, 1 (worst) .. 5 (best).")
    note: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def keep_calendar_part(cls, v):
        # The diary API sometimes sends full timestamps; only the day matters.
        if isinstance(v, str):
            return v[:10]
        return v
