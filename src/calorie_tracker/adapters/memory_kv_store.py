"""In-memory key-value store."""

from collections.abc import Sequence
from dataclasses import dataclass

from calorie_tracker.services.storage import KeyValueStore


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for local use and tests."""

    _entries: dict[str, str]

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries = dict(entries or {})

    async def get(self, key: str) -> str | None:
        return self._entries.get(key)

    async def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    async def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, str | None]]:
        return [(key, self._entries.get(key)) for key in keys]

    async def multi_remove(self, keys: Sequence[str]) -> None:
        for key in keys:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        """Return the stored keys."""
        return list(self._entries)
