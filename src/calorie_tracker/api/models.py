"""Request and response models for the HTTP API."""

from dataclasses import asdict
from datetime import datetime

from pydantic import BaseModel, field_validator

from calorie_tracker.domain.dashboard import DashboardState
from calorie_tracker.domain.history import HistoryEntry
from calorie_tracker.domain.meals import Meal
from calorie_tracker.domain.profile import UserProfile
from calorie_tracker.services.profiles import ProfileForm


class ProfileFormIn(BaseModel):
    """Settings form as typed by the user."""

    name: str = ""
    age: str = ""
    weight: str = ""
    calories: str = ""
    protein: str = ""
    carbs: str = ""
    fats: str = ""

    @field_validator(
        "age", "weight", "calories", "protein", "carbs", "fats", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def from_form(cls, form: ProfileForm) -> "ProfileFormIn":
        return cls(**asdict(form))

    def to_form(self) -> ProfileForm:
        return ProfileForm(**self.model_dump())


class MealOut(BaseModel):
    id: str | int | float | None
    name: str
    calories: float
    protein: float
    carbs: float
    fats: float

    @classmethod
    def from_meal(cls, meal: Meal) -> "MealOut":
        meal_id = meal.id if isinstance(meal.id, str | int | float) else None
        return cls(
            id=meal_id,
            name=meal.name,
            calories=meal.calories,
            protein=meal.protein,
            carbs=meal.carbs,
            fats=meal.fats,
        )


class ProfileOut(BaseModel):
    name: str
    age: int | None = None
    weight: float | None = None
    calories: int | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileOut":
        return cls(**profile.to_payload())


class ProgressOut(BaseModel):
    nutrient: str
    total: float
    goal: float | None
    ratio: float
    percent: int
    over_goal: bool


class DashboardOut(BaseModel):
    """Home view payload."""

    categories: dict[str, list[MealOut]]
    totals: dict[str, float]
    progress: list[ProgressOut]
    profile: ProfileOut | None
    needs_onboarding: bool
    refreshed_at: datetime

    @classmethod
    def from_state(cls, state: DashboardState) -> "DashboardOut":
        return cls(
            categories={
                category.value: [MealOut.from_meal(meal) for meal in meals]
                for category, meals in state.categories.items()
            },
            totals=state.totals.as_dict(),
            progress=[
                ProgressOut(
                    nutrient=row.nutrient,
                    total=row.total,
                    goal=row.goal,
                    ratio=row.ratio,
                    percent=row.percent,
                    over_goal=row.over_goal,
                )
                for row in state.progress
            ],
            profile=ProfileOut.from_profile(state.profile) if state.profile else None,
            needs_onboarding=state.needs_onboarding,
            refreshed_at=state.refreshed_at,
        )


class HistoryEntryOut(BaseModel):
    date: str
    calories: float
    protein: float
    carbs: float
    fats: float

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryOut":
        return cls(**entry.to_payload())


class SaveDayOut(BaseModel):
    saved: bool
    entry: HistoryEntryOut | None = None
    reset_failed: bool = False


class AlertOut(BaseModel):
    title: str
    message: str
    raised_at: datetime
