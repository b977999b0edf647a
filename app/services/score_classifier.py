"""
Score classifier: burnout test scores → qualitative levels.

Thresholds are inclusive upper bounds
-------------------------------------
  total      : <=16 low | <=32 medium | <=48 high | else very_high
  physical   : <=4  low | <=8  medium | <=12 high | else very_high
  emotional  : <=6  low | <=12 medium | <=18 high | else very_high
  cognitive  : same ladder as emotional

Every function here is total over all integers: out-of-range scores fall
through the same ladder instead of raising.
"""
from __future__ import annotations

import enum
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


class Level(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    very_high = "very_high"


class Domain(str, enum.Enum):
    physical = "physical"
    emotional = "emotional"
    cognitive = "cognitive"


# (upper bound, level) pairs, checked in order
_TOTAL_LADDER = ((16, Level.low), (32, Level.medium), (48, Level.high))

_DOMAIN_LADDERS = {
    Domain.physical: ((4, Level.low), (8, Level.medium), (12, Level.high)),
    Domain.emotional: ((6, Level.low), (12, Level.medium), (18, Level.high)),
    Domain.cognitive: ((6, Level.low), (12, Level.medium), (18, Level.high)),
}

DOMAIN_MAX = {
    Domain.physical: 16,
    Domain.emotional: 24,
    Domain.cognitive: 24,
}

LEVEL_LABELS = {
    Level.low: "Low burnout level",
    Level.medium: "Medium burnout level",
    Level.high: "High burnout level",
    Level.very_high: "Very high burnout level",
}
NO_DATA_LABEL = "No data"

# Colour of the burnout card text
LEVEL_TONES = {
    Level.low: "green",
    Level.medium: "yellow",
    Level.high: "orange",
    Level.very_high: "red",
}
NO_DATA_TONE = "gray"


def _climb(ladder, score: int) -> Level:
    for upper, level in ladder:
        if score <= upper:
            return level
    return Level.very_high


def classify_total(total: int) -> Level:
    return _climb(_TOTAL_LADDER, total)


def classify_domain(domain: Domain | str, score: int) -> Level:
    return _climb(_DOMAIN_LADDERS[Domain(domain)], score)


def round_half_up(numerator: int, denominator: int) -> int:
    """round(numerator / denominator) with .5 going up, not to even."""
    value = Decimal(numerator) / Decimal(denominator)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def fill(score: int, maximum: int) -> int:
    """Bar width in percent for `score` out of `maximum`, always in [0, 100]."""
    if maximum <= 0:
        return 0
    pct = round_half_up(score * 100, maximum)
    return max(0, min(100, pct))


def domain_fill(domain: Domain | str, score: int) -> int:
    return fill(score, DOMAIN_MAX[Domain(domain)])


def level_label(level: Optional[Level]) -> str:
    return NO_DATA_LABEL if level is None else LEVEL_LABELS[level]


def level_tone(level: Optional[Level]) -> str:
    return NO_DATA_TONE if level is None else LEVEL_TONES[level]
