"""Domain model for reusable meal templates."""

from dataclasses import dataclass

from nutrition_sync.domain.logs import Log
from nutrition_sync.domain.nutrition import NutritionTotals, dump_totals, parse_totals


@dataclass(frozen=True)
class CustomMeal:
    """A named nutrition template saved by a user."""

    id: str
    name: str
    uid: str = ""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0

    @property
    def totals(self) -> NutritionTotals:
        return NutritionTotals(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber,
        )

    def to_log(self, log_id: str, day: str, quantity: float = 1) -> Log:
        """Build a log entry for ``quantity`` servings of this meal.

        Energy and macros are multiplied by the quantity; fiber is not tracked
        on meal entries. A quantity that is not positive counts as one serving.
        """
        servings = quantity if quantity > 0 else 1
        name = self.name if servings <= 1 else f"{self.name} x{servings:g}"
        return Log(
            id=log_id,
            date=day,
            uid=self.uid,
            meal=name,
            nutrition=NutritionTotals(
                calories=self.calories * servings,
                protein=self.protein * servings,
                carbs=self.carbs * servings,
                fat=self.fat * servings,
            ),
        )


def parse_custom_meal(row: dict[str, object]) -> CustomMeal:
    """Parse a stored or remote custom meal document."""
    totals = parse_totals(row)
    return CustomMeal(
        id=str(row["id"]),
        uid=str(row.get("uid") or ""),
        name=str(row.get("name", "")),
        calories=totals.calories,
        protein=totals.protein,
        carbs=totals.carbs,
        fat=totals.fat,
        fiber=totals.fiber,
    )


def dump_custom_meal(meal: CustomMeal) -> dict[str, object]:
    return {
        "id": meal.id,
        "uid": meal.uid,
        "name": meal.name,
        **dump_totals(meal.totals),
    }
