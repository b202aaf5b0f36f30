"""Tests for the dashboard refresh cycle and save-day flow."""

import asyncio

import pytest

from calorie_tracker.domain.history import format_history_date
from calorie_tracker.domain.meals import Category, NutrientTotals
from calorie_tracker.services.alerts import InMemoryAlertFeed
from calorie_tracker.services.dashboard import DashboardService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.reconciler import ReconcilerService
from calorie_tracker.services.storage import JsonStorage
from tests.conftest import FakeKeyValueStore

BREAKFAST = {"id": 1, "name": "Eggs", "calories": 300, "protein": 20, "carbs": 30, "fats": 10}
DINNER = {"id": 2, "name": "Pasta", "calories": 500, "protein": 25, "carbs": 40, "fats": 15}


@pytest.fixture
def service(storage: JsonStorage, alert_feed: InMemoryAlertFeed) -> DashboardService:
    return DashboardService(
        storage=storage,
        reconciler=ReconcilerService(storage),
        profile_service=ProfileService(storage),
        alerts=alert_feed,
    )


def _seed_day(store: FakeKeyValueStore) -> None:
    store.seed("userData", {"name": "Alex", "calories": 2000})
    store.seed("meals", [BREAKFAST, DINNER])
    store.seed("meals_breakfast", [BREAKFAST])
    store.seed("meals_lunch", [])
    store.seed("meals_dinner", [DINNER])


def test_refresh_computes_totals_and_progress(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    _seed_day(store)

    state = asyncio.run(service.refresh())

    assert state is not None
    assert state.totals == NutrientTotals(calories=800, protein=45, carbs=70, fats=25)
    calories = state.progress[0]
    assert calories.nutrient == "calories"
    assert calories.ratio == pytest.approx(0.4)
    assert calories.percent == 40
    assert [meal.name for meal in state.categories[Category.DINNER]] == ["Pasta"]
    assert state.categories[Category.SNACK] == []
    assert state.needs_onboarding is False
    assert store.writes == []


def test_refresh_prunes_stale_meals(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    _seed_day(store)
    store.seed("meals", [BREAKFAST])

    state = asyncio.run(service.refresh())
    second = asyncio.run(service.refresh())

    assert state is not None
    assert state.pruned == [Category.DINNER]
    assert store.load("meals_dinner") == []
    assert second is not None
    assert second.totals.calories == 300
    assert second.pruned == []


def test_refresh_without_profile_needs_onboarding(service: DashboardService) -> None:
    state = asyncio.run(service.refresh())

    assert state is not None
    assert state.needs_onboarding is True
    assert state.totals == NutrientTotals()


def test_refresh_read_failure_alerts_and_keeps_state(
    store: FakeKeyValueStore,
    service: DashboardService,
    alert_feed: InMemoryAlertFeed,
) -> None:
    _seed_day(store)
    previous = asyncio.run(service.refresh())
    store.fail_reads.add("meals_lunch")

    state = asyncio.run(service.refresh())

    assert state is previous
    alerts = alert_feed.drain()
    assert [(a.title, a.message) for a in alerts] == [("Error", "Failed to fetch meals")]


def test_refresh_prune_failure_still_updates_totals(
    store: FakeKeyValueStore,
    service: DashboardService,
    alert_feed: InMemoryAlertFeed,
) -> None:
    _seed_day(store)
    store.seed("meals", [])
    store.fail_writes.add("meals_breakfast")

    state = asyncio.run(service.refresh())

    assert state is not None
    assert state.totals.calories == 800
    assert [a.message for a in alert_feed.drain()] == [
        "Failed to remove invalid meals from categories"
    ]


def test_refresh_survives_malformed_category(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    _seed_day(store)
    store.seed_raw("meals_lunch", "[{oops")

    state = asyncio.run(service.refresh())

    assert state is not None
    assert state.totals.calories == 800


def test_save_day_records_history_and_resets(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    _seed_day(store)
    asyncio.run(service.refresh())

    result = asyncio.run(service.save_day())

    assert result.saved is True
    assert result.entry is not None
    assert result.entry.date == format_history_date(service.today())
    history = store.load("mealHistory")
    assert history == [result.entry.to_payload()]
    for category in Category:
        assert not store.has(category.storage_key)
    assert service.state is not None
    assert service.state.totals == NutrientTotals()


def test_save_day_guard_blocks_zero_totals(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    store.seed("meals", [{"id": 1}])
    store.seed("meals_lunch", [{"id": 1, "calories": 250, "protein": 5, "carbs": 60}])

    result = asyncio.run(service.save_day())

    assert result.saved is False
    assert not store.has("mealHistory")
    assert store.has("meals_lunch")


def test_save_day_history_failure_alerts(
    store: FakeKeyValueStore,
    service: DashboardService,
    alert_feed: InMemoryAlertFeed,
) -> None:
    _seed_day(store)
    store.fail_writes.add("mealHistory")

    result = asyncio.run(service.save_day())

    assert result.saved is False
    assert store.has("meals_breakfast")
    assert [a.message for a in alert_feed.drain()] == ["Failed to save data"]


def test_save_day_reset_failure_keeps_snapshot(
    store: FakeKeyValueStore,
    service: DashboardService,
    alert_feed: InMemoryAlertFeed,
) -> None:
    _seed_day(store)
    asyncio.run(service.refresh())
    store.fail_writes.add("meals_dinner")

    result = asyncio.run(service.save_day())

    assert result.saved is True
    assert result.reset_failed is True
    assert result.entry is not None
    assert store.load("mealHistory") == [result.entry.to_payload()]
    assert store.has("meals_breakfast")
    assert service.state is not None
    assert service.state.totals.calories == 800
    assert [a.message for a in alert_feed.drain()] == ["Failed to reset meal data"]


def test_clear_category_removes_only_that_key(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    _seed_day(store)

    assert asyncio.run(service.clear_category(Category.BREAKFAST)) is True

    assert not store.has("meals_breakfast")
    assert store.has("meals_dinner")


def test_clear_category_failure_alerts(
    store: FakeKeyValueStore,
    service: DashboardService,
    alert_feed: InMemoryAlertFeed,
) -> None:
    store.fail_writes.add("meals_snack")

    assert asyncio.run(service.clear_category(Category.SNACK)) is False
    assert alert_feed.drain()[0].title == "Error"


def test_current_state_refreshes_once(
    store: FakeKeyValueStore, service: DashboardService
) -> None:
    _seed_day(store)

    first = asyncio.run(service.current_state())
    store.seed("meals_lunch", [BREAKFAST])
    second = asyncio.run(service.current_state())

    assert first is second
