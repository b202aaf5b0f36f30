"""Domain model for the user profile and daily goals."""

from dataclasses import dataclass

from calorie_tracker.domain.meals import NUTRIENTS, to_optional_number


@dataclass(frozen=True)
class UserProfile:
    """User profile; calories/protein/carbs/fats are daily targets."""

    name: str = ""
    age: int | None = None
    weight: float | None = None
    calories: int | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "UserProfile":
        """Build a profile from stored JSON, dropping invalid numbers."""
        age = to_optional_number(payload.get("age"))
        calories = to_optional_number(payload.get("calories"))
        return cls(
            name=str(payload.get("name") or ""),
            age=int(age) if age is not None else None,
            weight=to_optional_number(payload.get("weight")),
            calories=int(calories) if calories is not None else None,
            protein=to_optional_number(payload.get("protein")),
            carbs=to_optional_number(payload.get("carbs")),
            fats=to_optional_number(payload.get("fats")),
        )

    def to_payload(self) -> dict[str, object]:
        """Serialize for storage, omitting absent numeric fields."""
        payload: dict[str, object] = {"name": self.name}
        for field_name in ("age", "weight", *NUTRIENTS):
            value = getattr(self, field_name)
            if value is not None:
                payload[field_name] = value
        return payload

    def goal(self, nutrient: str) -> float | None:
        """Return the daily goal for a nutrient, if set."""
        if nutrient not in NUTRIENTS:
            raise KeyError(nutrient)
        return getattr(self, nutrient)
