"""Supabase-backed key-value store."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calorie_tracker.services.storage import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores JSON text in a ``(namespace, key, value)`` table.

    The supabase client is synchronous, so every query runs in a worker
    thread to keep the event loop free.
    """

    client: Client
    table: str = "kv_store"
    namespace: str = "default"

    async def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return await asyncio.to_thread(self._get, key)

    async def set(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        await asyncio.to_thread(self._set, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove, [key])

    async def multi_get(self, keys: Sequence[str]) -> list[tuple[str, str | None]]:
        """Fetch several keys in one query, ordered as requested."""
        if not keys:
            return []
        return await asyncio.to_thread(self._multi_get, list(keys))

    async def multi_remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        await asyncio.to_thread(self._remove, list(keys))

    async def clear(self) -> None:
        """Delete every key in this store's namespace."""
        await asyncio.to_thread(self._clear)

    def _get(self, key: str) -> str | None:
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("namespace", self.namespace)
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def _set(self, key: str, value: str) -> None:
        self.client.table(self.table).upsert(
            {
                "namespace": self.namespace,
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="namespace,key",
        ).execute()

    def _multi_get(self, keys: list[str]) -> list[tuple[str, str | None]]:
        response = (
            self.client.table(self.table)
            .select("key, value")
            .eq("namespace", self.namespace)
            .in_("key", keys)
            .execute()
        )
        found = {row["key"]: row.get("value") for row in response.data or []}
        return [(key, found.get(key)) for key in keys]

    def _remove(self, keys: list[str]) -> None:
        query = self.client.table(self.table).delete().eq("namespace", self.namespace)
        if len(keys) == 1:
            query = query.eq("key", keys[0])
        else:
            query = query.in_("key", keys)
        query.execute()

    def _clear(self) -> None:
        self.client.table(self.table).delete().eq(
            "namespace", self.namespace
        ).execute()
