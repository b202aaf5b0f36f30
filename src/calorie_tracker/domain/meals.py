"""Domain models for meals, categories and nutrient totals."""

import math
from dataclasses import dataclass
from enum import StrEnum


class Category(StrEnum):
    """Meal-time bucket, declared in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    SNACK = "snack"
    DINNER = "dinner"

    @property
    def storage_key(self) -> str:
        """Key of the category list in the key-value store."""
        return f"meals_{self.value}"


NUTRIENTS: tuple[str, ...] = ("calories", "protein", "carbs", "fats")


@dataclass(frozen=True)
class Meal:
    """A logged meal as stored in a category or master list."""

    id: object
    name: str
    calories: float
    protein: float
    carbs: float
    fats: float

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Meal":
        """Build a meal from stored JSON, reading missing numbers as 0."""
        return cls(
            id=payload.get("id"),
            name=str(payload.get("name") or ""),
            calories=to_number(payload.get("calories")),
            protein=to_number(payload.get("protein")),
            carbs=to_number(payload.get("carbs")),
            fats=to_number(payload.get("fats")),
        )


@dataclass(frozen=True)
class NutrientTotals:
    """Summed calories and macros for a set of meals."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0

    def get(self, nutrient: str) -> float:
        """Return the total for a nutrient name."""
        if nutrient not in NUTRIENTS:
            raise KeyError(nutrient)
        return getattr(self, nutrient)

    def as_dict(self) -> dict[str, float]:
        return {nutrient: self.get(nutrient) for nutrient in NUTRIENTS}


def to_number(value: object) -> float:
    """Coerce a stored JSON value to a finite number, defaulting to 0.

    Integers stay integers so sums of whole numbers are stored as ``2000``
    rather than ``2000.0``.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            return 0
    else:
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return number


def to_optional_number(value: object) -> float | None:
    """Coerce a stored JSON value to a number, or None when absent or invalid."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return int(number) if number.is_integer() and "." not in value else number
    return None
