"""Tests for container wiring."""

import asyncio

import pytest

from calorie_tracker.adapters.memory_kv_store import InMemoryKeyValueStore
from calorie_tracker.config import Settings
from calorie_tracker.containers import build_container, build_store


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings)
    assert isinstance(container.storage.store, InMemoryKeyValueStore)
    assert container.refresh_task.interval_seconds == settings.refresh_interval_seconds
    assert container.reconciler.save_guard == "any_zero"
    asyncio.run(container.close_resources())


def test_build_store_requires_supabase_credentials() -> None:
    settings = Settings(admin_token="admin-token", storage_backend="supabase")

    with pytest.raises(ValueError, match="supabase_url"):
        build_store(settings)
