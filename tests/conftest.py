"""Shared test fixtures."""

import json
from collections.abc import Sequence
from collections.abc import Set as AbstractSet
from dataclasses import dataclass, field

import pytest

from calorie_tracker.adapters.memory_kv_store import InMemoryKeyValueStore
from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer, build_container
from calorie_tracker.services.alerts import InMemoryAlertFeed
from calorie_tracker.services.storage import JsonStorage, KeyValueStore


class StoreUnavailableError(RuntimeError):
    """Raised by the fake store for keys configured to fail."""


@dataclass
class FakeKeyValueStore(KeyValueStore):
    """In-memory store that records writes and can fail per key."""

    inner: InMemoryKeyValueStore = field(default_factory=InMemoryKeyValueStore)
    writes: list[str] = field(default_factory=list)
    removals: list[str] = field(default_factory=list)
    fail_reads: set[str] = field(default_factory=set)
    fail_writes: set[str] = field(default_factory=set)

    def seed(self, key: str, value: object) -> None:
        self.inner._entries[key] = json.dumps(value)

    def seed_raw(self, key: str, raw: str) -> None:
        self.inner._entries[key] = raw

    def load(self, key: str) -> object | None:
        raw = self.inner._entries.get(key)
        return None if raw is None else json.loads(raw)

    def has(self, key: str) -> bool:
        return key in self.inner._entries

    async def get(self, key: str) -> str | None:
        self._check(self.fail_reads, [key])
        return await self.inner.get(key)

    async def set(self, key: str, value: str) -> None:
        self._check(self.fail_writes, [key])
        self.writes.append(key)
        await self.inner.set(key, value)

    async def remove(self, key: str) -> None:
        self._check(self.fail_writes, [key])
        self.removals.append(key)
        await self.inner.remove(key)

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, str | None]]:
        self._check(self.fail_reads, keys)
        return await self.inner.multi_get(keys)

    async def multi_remove(self, keys: Sequence[str]) -> None:
        self._check(self.fail_writes, keys)
        self.removals.extend(keys)
        await self.inner.multi_remove(keys)

    async def clear(self) -> None:
        self._check(self.fail_writes, ["*"])
        self.removals.append("*")
        await self.inner.clear()

    @staticmethod
    def _check(failing: AbstractSet[str], keys: Sequence[str]) -> None:
        for key in keys:
            if key in failing:
                raise StoreUnavailableError(key)


@pytest.fixture
def settings() -> Settings:
    return Settings(admin_token="admin-token", refresh_interval_seconds=0.01)


@pytest.fixture
def store() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture
def storage(store: FakeKeyValueStore) -> JsonStorage:
    return JsonStorage(store)


@pytest.fixture
def alert_feed() -> InMemoryAlertFeed:
    return InMemoryAlertFeed()


@pytest.fixture
def container(settings: Settings, store: FakeKeyValueStore) -> AppContainer:
    return build_container(settings, store=store)
