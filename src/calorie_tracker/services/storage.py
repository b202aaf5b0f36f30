"""Key-value storage interface and typed JSON access."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from calorie_tracker.domain.errors import (
    ParseFailure,
    StorageReadFailure,
    StorageWriteFailure,
)
from calorie_tracker.domain.meals import Category

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROFILE_KEY = "userData"
MASTER_MEALS_KEY = "meals"
HISTORY_KEY = "mealHistory"
CATEGORY_KEYS: tuple[str, ...] = tuple(category.storage_key for category in Category)


class KeyValueStore(Protocol):
    """Storage engine holding JSON text by string key."""

    async def get(self, key: str) -> str | None:
        """Return the raw value for a key, or None when absent."""

    async def set(self, key: str, value: str) -> None:
        """Store a raw value under a key."""

    async def remove(self, key: str) -> None:
        """Delete a key if present."""

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, str | None]]:
        """Return ``(key, value)`` pairs in the order requested."""

    async def multi_remove(self, keys: Sequence[str]) -> None:
        """Delete several keys."""

    async def clear(self) -> None:
        """Delete every key."""


@dataclass
class JsonStorage:
    """JSON codec over a key-value store with explicit defaults."""

    store: KeyValueStore

    async def load_json(self, key: str, default: T) -> object | T:
        """Return the decoded value for a key, or ``default``.

        Absent keys and malformed JSON both yield ``default``; a malformed
        value is logged and never raised. Engine failures raise
        ``StorageReadFailure``.
        """
        try:
            raw = await self.store.get(key)
        except Exception as exc:
            raise StorageReadFailure(key) from exc
        return _decode(key, raw, default)

    async def multi_load_json(
        self, keys: Sequence[str], default: T
    ) -> dict[str, object | T]:
        """Batched ``load_json``; the result preserves the key order."""
        try:
            pairs = await self.store.multi_get(keys)
        except Exception as exc:
            raise StorageReadFailure(",".join(keys)) from exc
        values = dict(pairs)
        return {key: _decode(key, values.get(key), default) for key in keys}

    async def load_list(self, key: str) -> list[object]:
        """Load a JSON array, treating any other shape as empty."""
        value = await self.load_json(key, [])
        return value if isinstance(value, list) else []

    async def save_json(self, key: str, value: object) -> None:
        """Encode and store a value."""
        try:
            await self.store.set(key, json.dumps(value))
        except Exception as exc:
            raise StorageWriteFailure(key) from exc

    async def remove(self, key: str) -> None:
        try:
            await self.store.remove(key)
        except Exception as exc:
            raise StorageWriteFailure(key) from exc

    async def multi_remove(self, keys: Sequence[str]) -> None:
        try:
            await self.store.multi_remove(keys)
        except Exception as exc:
            raise StorageWriteFailure(",".join(keys)) from exc

    async def clear(self) -> None:
        try:
            await self.store.clear()
        except Exception as exc:
            raise StorageWriteFailure("*") from exc


def parse_stored_json(key: str, raw: str) -> object:
    """Decode stored JSON text, raising ``ParseFailure`` when it is malformed."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseFailure(key, f"Stored value for {key!r} is not valid JSON") from exc


def _decode(key: str, raw: str | None, default: T) -> object | T:
    if raw is None:
        return default
    try:
        value = parse_stored_json(key, raw)
    except ParseFailure as exc:
        logger.warning("%s, using default", exc, exc_info=exc)
        return default
    if value is None:
        return default
    return value
