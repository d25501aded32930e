"""Domain model for logged meals and exercise."""

from dataclasses import dataclass

from nutrition_sync.domain.nutrition import NutritionTotals, dump_totals, parse_totals


@dataclass(frozen=True)
class Log:
    """A meal, exercise or nutrition entry for a calendar date."""

    id: str
    date: str
    uid: str = ""
    meal: str | None = None
    exercise: str | None = None
    nutrition: NutritionTotals | None = None


def parse_log(row: dict[str, object]) -> Log:
    """Parse a stored or remote log document."""
    nutrition = row.get("nutrition")
    total = nutrition.get("total") if isinstance(nutrition, dict) else None
    return Log(
        id=str(row["id"]),
        uid=str(row.get("uid") or ""),
        date=str(row.get("date", "")),
        meal=row.get("meal"),
        exercise=row.get("exercise"),
        nutrition=parse_totals(total) if total is not None else None,
    )


def dump_log(log: Log) -> dict[str, object]:
    """Serialize a log to its document shape."""
    payload: dict[str, object] = {"id": log.id, "uid": log.uid, "date": log.date}
    if log.meal is not None:
        payload["meal"] = log.meal
    if log.exercise is not None:
        payload["exercise"] = log.exercise
    if log.nutrition is not None:
        payload["nutrition"] = {"total": dump_totals(log.nutrition)}
    return payload
