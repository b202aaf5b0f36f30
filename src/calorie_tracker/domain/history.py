"""Domain models for the daily history log."""

from dataclasses import dataclass
from datetime import date

from calorie_tracker.domain.meals import NutrientTotals, to_number


def format_history_date(day: date) -> str:
    """Render a calendar day as the history key, e.g. ``5 Oct 2026``."""
    return f"{day.day} {day.strftime('%b %Y')}"


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of one day's nutrient totals."""

    date: str
    calories: float
    protein: float
    carbs: float
    fats: float

    @classmethod
    def from_totals(cls, day: date, totals: NutrientTotals) -> "HistoryEntry":
        return cls(
            date=format_history_date(day),
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fats=totals.fats,
        )

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "HistoryEntry":
        return cls(
            date=str(payload.get("date") or ""),
            calories=to_number(payload.get("calories")),
            protein=to_number(payload.get("protein")),
            carbs=to_number(payload.get("carbs")),
            fats=to_number(payload.get("fats")),
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "date": self.date,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
        }
