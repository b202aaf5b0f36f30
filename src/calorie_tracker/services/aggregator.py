"""Nutrient totals and goal progress."""

import math
from collections.abc import Iterable, Mapping

from calorie_tracker.domain.dashboard import NutrientProgress
from calorie_tracker.domain.meals import NUTRIENTS, Meal, NutrientTotals
from calorie_tracker.domain.profile import UserProfile


def compute_totals(category_lists: Mapping[object, Iterable[Meal]]) -> NutrientTotals:
    """Sum every nutrient across all meals in all categories."""
    total = NutrientTotals()
    for meals in category_lists.values():
        for meal in meals:
            total = NutrientTotals(
                calories=total.calories + meal.calories,
                protein=total.protein + meal.protein,
                carbs=total.carbs + meal.carbs,
                fats=total.fats + meal.fats,
            )
    return total


def progress(total: float, goal: float | None) -> float:
    """Return ``total / goal``, or 0 when the goal is unset or not positive."""
    if not goal or goal <= 0:
        return 0.0
    return total / goal


def build_progress(
    totals: NutrientTotals, profile: UserProfile | None
) -> list[NutrientProgress]:
    """Return progress rows for calories, protein, carbs and fats."""
    rows = []
    for nutrient in NUTRIENTS:
        total = totals.get(nutrient)
        goal = profile.goal(nutrient) if profile else None
        ratio = progress(total, goal)
        rows.append(
            NutrientProgress(
                nutrient=nutrient,
                total=total,
                goal=goal,
                ratio=ratio,
                percent=math.floor(ratio * 100 + 0.5),
                over_goal=goal is not None and total > goal,
            )
        )
    return rows
