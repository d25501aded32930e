"""Domain models for nutrition totals and targets."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from nutrition_sync.domain.nutrition import NutritionTotals


@dataclass(frozen=True)
class DailyTotals:
    """Nutrition totals for a single day."""

    day: date
    totals: NutritionTotals
    log_count: int = 0


@dataclass(frozen=True)
class PeriodSummary:
    """Per-day totals and averages across a period."""

    start: date
    daily: list[DailyTotals]
    average: NutritionTotals


@dataclass(frozen=True)
class NutrientTarget:
    """Inclusive daily range for a nutrient."""

    min: float
    max: float


class TargetStatus(StrEnum):
    BELOW = "below"
    WITHIN = "within"
    ABOVE = "above"


@dataclass(frozen=True)
class TargetReport:
    """Per-nutrient status of a day's totals against targets."""

    day: date
    statuses: dict[str, TargetStatus]

    @property
    def all_met(self) -> bool:
        return all(status is TargetStatus.WITHIN for status in self.statuses.values())
