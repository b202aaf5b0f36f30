"""Domain models for the dashboard view."""

from dataclasses import dataclass, field
from datetime import datetime

from calorie_tracker.domain.meals import Category, Meal, NutrientTotals
from calorie_tracker.domain.profile import UserProfile


@dataclass(frozen=True)
class NutrientProgress:
    """Progress of one nutrient towards its daily goal."""

    nutrient: str
    total: float
    goal: float | None
    ratio: float
    percent: int
    over_goal: bool


@dataclass(frozen=True)
class DashboardState:
    """Result of one refresh cycle."""

    categories: dict[Category, list[Meal]]
    totals: NutrientTotals
    profile: UserProfile | None
    progress: list[NutrientProgress]
    refreshed_at: datetime
    pruned: list[Category] = field(default_factory=list)

    @property
    def needs_onboarding(self) -> bool:
        """True when no profile has been saved yet."""
        return self.profile is None
