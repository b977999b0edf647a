"""
Dashboard view model: combines the burnout score sources and the mood grid.

Score precedence
----------------
  1. persisted score on the user record
  2. latest test's total_score
  3. absent → level None ("no data"), never 0 / low

Domain breakdown comes only from a latest test; a persisted score alone
never produces one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from app.schemas.portal import BurnoutTestResult
from app.services.mood_calendar import BucketPercentages, MonthGrid, bucket_percentages
from app.services.score_classifier import (
    DOMAIN_MAX,
    Domain,
    Level,
    classify_domain,
    classify_total,
    fill,
    level_label,
    level_tone,
)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainScore:
    domain: Domain
    score: int
    max_score: int
    level: Level
    fill: int


@dataclass(frozen=True)
class Recommendation:
    summary: str
    actions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DashboardView:
    effective_score: Optional[int]
    level: Optional[Level]
    level_label: str
    tone: str
    domain_breakdown: Optional[dict[Domain, DomainScore]]
    recommendation: Recommendation
    latest_test: Optional[BurnoutTestResult]
    grid: MonthGrid
    percentages: BucketPercentages


# ---------------------------------------------------------------------------
# Recommendations (static content)
# ---------------------------------------------------------------------------

_RECOVERY_ACTIONS = [
    "Plan short breaks throughout the day.",
    "Limit overtime and work at your own pace.",
    "Discuss workload and support options with your manager.",
    "Set aside time for rest, sleep and activities you enjoy.",
]

_RECOMMENDATIONS = {
    None: Recommendation(
        summary=(
            "Take the burnout survey so we can prepare personal recommendations "
            "on managing stress and restoring your energy."
        ),
    ),
    Level.low: Recommendation(
        summary="Your burnout level is low. Keep the habits that help you stay balanced.",
        actions=[
            "Keep logging your mood to spot changes early.",
            "Retake the survey periodically.",
        ],
    ),
    Level.medium: Recommendation(
        summary=(
            "Pay attention to the areas where your level is high or very high. "
            "In the near future, try to:"
        ),
        actions=list(_RECOVERY_ACTIONS),
    ),
    Level.high: Recommendation(
        summary=(
            "Your burnout level is high. Focus on the areas marked high or very high "
            "and try to:"
        ),
        actions=list(_RECOVERY_ACTIONS),
    ),
    Level.very_high: Recommendation(
        summary=(
            "Your burnout level is very high. Consider reaching out to HR or a "
            "specialist, and in the meantime try to:"
        ),
        actions=list(_RECOVERY_ACTIONS),
    ),
}


def recommendation_for(level: Optional[Level]) -> Recommendation:
    return _RECOMMENDATIONS[level]


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def effective_burnout_score(
    persisted_score: Optional[int],
    latest_test: Optional[BurnoutTestResult],
) -> Optional[int]:
    if persisted_score is not None:
        return persisted_score
    if latest_test is not None:
        return latest_test.total_score
    return None


def domain_breakdown(
    latest_test: Optional[BurnoutTestResult],
) -> Optional[dict[Domain, DomainScore]]:
    if latest_test is None:
        return None
    scores = {
        Domain.physical: latest_test.physical_score,
        Domain.emotional: latest_test.emotional_score,
        Domain.cognitive: latest_test.cognitive_score,
    }
    return {
        domain: DomainScore(
            domain=domain,
            score=score,
            max_score=DOMAIN_MAX[domain],
            level=classify_domain(domain, score),
            fill=fill(score, DOMAIN_MAX[domain]),
        )
        for domain, score in scores.items()
    }


def compose(
    persisted_score: Optional[int],
    latest_test: Optional[BurnoutTestResult],
    grid: MonthGrid,
) -> DashboardView:
    score = effective_burnout_score(persisted_score, latest_test)
    level = None if score is None else classify_total(score)
    return DashboardView(
        effective_score=score,
        level=level,
        level_label=level_label(level),
        tone=level_tone(level),
        domain_breakdown=domain_breakdown(latest_test),
        recommendation=recommendation_for(level),
        latest_test=latest_test,
        grid=grid,
        percentages=bucket_percentages(grid, grid.days_in_month),
    )
