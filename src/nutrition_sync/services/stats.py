"""Daily and weekly nutrition totals."""

import math
from dataclasses import dataclass, replace
from datetime import date, timedelta

from nutrition_sync.domain.logs import Log
from nutrition_sync.domain.nutrition import NutritionTotals
from nutrition_sync.domain.stats import (
    DailyTotals,
    NutrientTarget,
    PeriodSummary,
    TargetReport,
    TargetStatus,
)
from nutrition_sync.services.logs import LogRepository

DAYS_PER_WEEK = 7

DEFAULT_TARGETS = {
    "calories": NutrientTarget(min=1000, max=1500),
    "protein": NutrientTarget(min=120, max=200),
    "carbs": NutrientTarget(min=120, max=250),
    "fat": NutrientTarget(min=30, max=70),
}

_SCALED_NUTRIENTS = ("calories", "protein", "carbs", "fat")


@dataclass
class StatsService:
    """Aggregates logged nutrition and compares it with daily targets."""

    log_repository: LogRepository
    targets: dict[str, NutrientTarget] | None = None

    async def get_day(self, day: date) -> DailyTotals:
        """Return totals for one date."""
        logs = await self.log_repository.fetch_all()
        return _aggregate_day(day, logs)

    async def get_week(self, day: date) -> PeriodSummary:
        """Return the Monday-start week containing ``day``."""
        start = day - timedelta(days=day.weekday())
        logs = await self.log_repository.fetch_all()
        daily = [
            _aggregate_day(start + timedelta(days=offset), logs)
            for offset in range(DAYS_PER_WEEK)
        ]
        total = NutritionTotals()
        for entry in daily:
            total = total + entry.totals
        average = NutritionTotals(
            calories=total.calories / DAYS_PER_WEEK,
            protein=total.protein / DAYS_PER_WEEK,
            carbs=total.carbs / DAYS_PER_WEEK,
            fat=total.fat / DAYS_PER_WEEK,
            fiber=total.fiber / DAYS_PER_WEEK,
        )
        return PeriodSummary(start=start, daily=daily, average=average)

    def evaluate(self, totals: DailyTotals) -> TargetReport:
        """Classify each targeted nutrient as below, within or above range."""
        targets = self.targets or DEFAULT_TARGETS
        statuses = {
            name: _status(getattr(totals.totals, name), target)
            for name, target in targets.items()
        }
        return TargetReport(day=totals.day, statuses=statuses)

    async def rescale_day(self, day: date, totals: NutritionTotals) -> list[Log]:
        """Spread edited day totals over that day's logs and save them.

        Each log keeps its share of the original total; when a nutrient's
        original total is zero the logs share it equally.
        """
        logs = [
            log
            for log in await self.log_repository.fetch_by_date(day)
            if log.nutrition is not None
        ]
        if not logs:
            return []
        original = _aggregate_day(day, logs).totals
        updated: list[Log] = []
        for log in logs:
            values = {}
            for name in _SCALED_NUTRIENTS:
                original_total = getattr(original, name)
                if original_total:
                    proportion = getattr(log.nutrition, name) / original_total
                else:
                    proportion = 1 / len(logs)
                values[name] = _round_half_up(getattr(totals, name) * proportion)
            rescaled = replace(log, nutrition=replace(log.nutrition, **values))
            updated.append(await self.log_repository.save(rescaled))
        return updated


def _aggregate_day(day: date, logs: list[Log]) -> DailyTotals:
    key = day.isoformat()
    total = NutritionTotals()
    count = 0
    for log in logs:
        if log.date != key:
            continue
        count += 1
        if log.nutrition is not None:
            total = total + log.nutrition
    return DailyTotals(day=day, totals=total, log_count=count)


def _status(value: float, target: NutrientTarget) -> TargetStatus:
    if value < target.min:
        return TargetStatus.BELOW
    if value > target.max:
        return TargetStatus.ABOVE
    return TargetStatus.WITHIN


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
