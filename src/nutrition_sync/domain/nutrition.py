"""Nutrition value objects."""

from dataclasses import dataclass

NUTRIENTS = ("calories", "protein", "carbs", "fat", "fiber")


@dataclass(frozen=True)
class NutritionTotals:
    """Macro and energy totals."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0

    def __add__(self, other: "NutritionTotals") -> "NutritionTotals":
        return NutritionTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )


def parse_totals(row: object) -> NutritionTotals:
    """Parse a nutrient mapping, defaulting missing values to zero."""
    if not isinstance(row, dict):
        return NutritionTotals()
    return NutritionTotals(**{key: _number(row.get(key)) for key in NUTRIENTS})


def dump_totals(totals: NutritionTotals) -> dict[str, float]:
    return {key: getattr(totals, key) for key in NUTRIENTS}


def _number(value: object) -> float:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int | float):
        return value
    try:
        return float(str(value))
    except ValueError:
        return 0
