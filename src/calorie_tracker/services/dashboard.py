"""Home dashboard: refresh cycle, save-day and category clearing."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from calorie_tracker.domain.dashboard import DashboardState
from calorie_tracker.domain.errors import StorageError
from calorie_tracker.domain.history import HistoryEntry
from calorie_tracker.domain.meals import Category, Meal
from calorie_tracker.services.aggregator import build_progress, compute_totals
from calorie_tracker.services.alerts import AlertSink
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.reconciler import ReconcilerService
from calorie_tracker.services.storage import CATEGORY_KEYS, JsonStorage

logger = logging.getLogger(__name__)


@dataclass
class SaveDayResult:
    """Outcome of a save-and-reset request."""

    saved: bool
    entry: HistoryEntry | None = None
    reset_failed: bool = False


@dataclass
class DashboardService:
    """Service behind the home view.

    All operations share one lock so the core never runs two storage
    operations against the same key at once. External writers are not
    coordinated; the next refresh picks up their changes.
    """

    storage: JsonStorage
    reconciler: ReconcilerService
    profile_service: ProfileService
    alerts: AlertSink
    timezone_name: str = "UTC"
    state: DashboardState | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def refresh(self) -> DashboardState | None:
        """Read categories, recompute totals and prune stale meals.

        Returns the new state, or the previous one when a read failed.
        """
        async with self._lock:
            try:
                categories = await self._load_categories()
                profile = await self.profile_service.load_profile()
            except StorageError:
                logger.exception("Failed to fetch meals")
                self.alerts.alert("Error", "Failed to fetch meals")
                return self.state

            totals = compute_totals(categories)
            pruned: list[Category] = []
            try:
                pruned = await self.reconciler.prune_categories()
            except StorageError:
                logger.exception("Failed to prune category meals")
                self.alerts.alert(
                    "Error", "Failed to remove invalid meals from categories"
                )

            self.state = DashboardState(
                categories=categories,
                totals=totals,
                profile=profile,
                progress=build_progress(totals, profile),
                refreshed_at=datetime.now(tz=UTC),
                pruned=pruned,
            )
            return self.state

    async def current_state(self) -> DashboardState | None:
        """Return the last refreshed state, refreshing once if there is none."""
        if self.state is None:
            return await self.refresh()
        return self.state

    async def save_day(self) -> SaveDayResult:
        """Snapshot today's totals and reset the categories.

        A failed reset after the history write still reports ``saved`` with
        ``reset_failed`` set; the categories keep their meals.
        """
        async with self._lock:
            try:
                categories = await self._load_categories()
                entry = await self.reconciler.record_day(categories, self.today())
            except StorageError:
                logger.exception("Failed to save daily totals")
                self.alerts.alert("Error", "Failed to save data")
                return SaveDayResult(saved=False)
            if entry is None:
                return SaveDayResult(saved=False)
            logger.info("Saved daily totals", extra={"date": entry.date})
            try:
                await self.reconciler.clear_all_categories()
            except StorageError:
                logger.exception("Failed to reset categories after saving")
                self.alerts.alert("Error", "Failed to reset meal data")
                return SaveDayResult(saved=True, entry=entry, reset_failed=True)
            if self.state is not None:
                empty = {category: [] for category in Category}
                totals = compute_totals(empty)
                self.state = DashboardState(
                    categories=empty,
                    totals=totals,
                    profile=self.state.profile,
                    progress=build_progress(totals, self.state.profile),
                    refreshed_at=datetime.now(tz=UTC),
                )
            return SaveDayResult(saved=True, entry=entry)

    async def clear_category(self, category: Category) -> bool:
        """Remove every meal from one category."""
        async with self._lock:
            try:
                await self.reconciler.clear_category(category)
            except StorageError:
                logger.exception(
                    "Failed to clear category", extra={"category": category.value}
                )
                self.alerts.alert("Error", "Failed to reset meal data")
                return False
            return True

    def today(self) -> date:
        """Return the current calendar day in the configured timezone."""
        return datetime.now(tz=ZoneInfo(self.timezone_name)).date()

    async def _load_categories(self) -> dict[Category, list[Meal]]:
        stored = await self.storage.multi_load_json(CATEGORY_KEYS, [])
        categories: dict[Category, list[Meal]] = {}
        for category in Category:
            raw = stored.get(category.storage_key)
            items = raw if isinstance(raw, list) else []
            categories[category] = [
                Meal.from_payload(item) for item in items if isinstance(item, dict)
            ]
        return categories
