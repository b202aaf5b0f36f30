"""Category reconciliation, daily snapshots and resets."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Literal

from calorie_tracker.domain.history import HistoryEntry
from calorie_tracker.domain.meals import NUTRIENTS, Category, Meal, NutrientTotals
from calorie_tracker.services.aggregator import compute_totals
from calorie_tracker.services.storage import (
    CATEGORY_KEYS,
    HISTORY_KEY,
    MASTER_MEALS_KEY,
    JsonStorage,
)

logger = logging.getLogger(__name__)

SaveGuard = Literal["any_zero", "no_meals"]


@dataclass
class ReconcilerService:
    """Keeps category lists consistent and records the daily history."""

    storage: JsonStorage
    save_guard: SaveGuard = "any_zero"

    async def prune_categories(self) -> list[Category]:
        """Drop category meals missing from the master list.

        Only categories whose length changed are written back. Keys are
        written independently, so a failure midway leaves earlier
        categories pruned.
        """
        master = await self.storage.load_list(MASTER_MEALS_KEY)
        valid_ids = valid_meal_ids(master)
        written: list[Category] = []
        for category in Category:
            meals = await self.storage.load_list(category.storage_key)
            kept = filter_valid(meals, valid_ids)
            if len(kept) != len(meals):
                await self.storage.save_json(category.storage_key, kept)
                written.append(category)
        if written:
            logger.info(
                "Pruned stale meals", extra={"categories": [c.value for c in written]}
            )
        return written

    async def record_day(
        self, categories: Mapping[Category, Sequence[Meal]], today: date
    ) -> HistoryEntry | None:
        """Upsert today's totals into the history log.

        Returns None without touching storage when the guard considers the
        day empty.
        """
        totals = compute_totals(categories)
        meal_count = sum(len(meals) for meals in categories.values())
        if is_day_empty(totals, meal_count, self.save_guard):
            return None
        entry = HistoryEntry.from_totals(today, totals)
        history = await self.storage.load_list(HISTORY_KEY)
        await self.storage.save_json(HISTORY_KEY, upsert_entry(history, entry))
        return entry

    async def save_day(
        self, categories: Mapping[Category, Sequence[Meal]], today: date
    ) -> HistoryEntry | None:
        """Snapshot today's totals into the history and clear the categories.

        Categories are only cleared after the history is written.
        """
        entry = await self.record_day(categories, today)
        if entry is not None:
            await self.clear_all_categories()
        return entry

    async def clear_category(self, category: Category) -> None:
        await self.storage.remove(category.storage_key)

    async def clear_all_categories(self) -> None:
        await self.storage.multi_remove(CATEGORY_KEYS)

    async def list_history(self) -> list[HistoryEntry]:
        """Return the stored history log in stored order."""
        history = await self.storage.load_list(HISTORY_KEY)
        return [
            HistoryEntry.from_payload(item) for item in history if isinstance(item, dict)
        ]

    async def reset_history(self) -> None:
        await self.storage.remove(HISTORY_KEY)

    async def reset_meals(self) -> None:
        """Remove the master meal list; categories are pruned on next refresh."""
        await self.storage.remove(MASTER_MEALS_KEY)

    async def reset_all(self) -> None:
        """Remove every stored key, profile included."""
        await self.storage.clear()


def valid_meal_ids(master: Iterable[object]) -> set[object]:
    """Collect hashable ids from the master meal list."""
    ids: set[object] = set()
    for meal in master:
        if not isinstance(meal, dict):
            continue
        meal_id = meal.get("id")
        try:
            hash(meal_id)
        except TypeError:
            continue
        ids.add(meal_id)
    return ids


def filter_valid(meals: Iterable[object], valid_ids: set[object]) -> list[object]:
    """Keep meals whose id is in ``valid_ids``, preserving order."""
    kept = []
    for meal in meals:
        if not isinstance(meal, dict):
            continue
        meal_id = meal.get("id")
        try:
            if meal_id in valid_ids:
                kept.append(meal)
        except TypeError:
            continue
    return kept


def upsert_entry(history: list[object], entry: HistoryEntry) -> list[object]:
    """Replace the entry with the same date in place, else append."""
    updated = list(history)
    payload = entry.to_payload()
    for index, existing in enumerate(updated):
        if isinstance(existing, dict) and existing.get("date") == entry.date:
            updated[index] = payload
            return updated
    updated.append(payload)
    return updated


def is_day_empty(totals: NutrientTotals, meal_count: int, guard: SaveGuard) -> bool:
    """Return True when a save should be skipped under the given guard."""
    if guard == "no_meals":
        return meal_count == 0
    return any(totals.get(nutrient) == 0 for nutrient in NUTRIENTS)
