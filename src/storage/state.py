"""Key-value state store backends: in-memory and Supabase.

Values are JSON-compatible dicts (or lists, for ID index entries) grouped by
collection. Both backends expose ``append_ids`` as a single atomic operation
so callers never read-modify-write an index themselves.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Protocol, cast

from supabase import Client, create_client

from src.config import settings

STATE_TABLE = "state"


class StateStore(Protocol):
    """Minimal key-value contract the core relies on."""

    def get(self, collection: str, key: str) -> Any | None: ...

    def set(self, collection: str, key: str, value: Any) -> None: ...

    def list_group(self, collection: str) -> list[Any]: ...

    def append_ids(self, collection: str, key: str, ids: list[str]) -> list[str]: ...


class InMemoryStateStore:
    """Process-local store guarded by a lock. Used for local runs and tests."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, collection: str, key: str) -> Any | None:
        with self._lock:
            value = self._data.get(collection, {}).get(key)
            return copy.deepcopy(value)

    def set(self, collection: str, key: str, value: Any) -> None:
        with self._lock:
            self._data.setdefault(collection, {})[key] = copy.deepcopy(value)

    def list_group(self, collection: str) -> list[Any]:
        with self._lock:
            return [copy.deepcopy(v) for v in self._data.get(collection, {}).values()]

    def append_ids(self, collection: str, key: str, ids: list[str]) -> list[str]:
        with self._lock:
            group = self._data.setdefault(collection, {})
            current = list(group.get(key) or [])
            current.extend(ids)
            group[key] = current
            return list(current)


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


class SupabaseStateStore:
    """State store backed by a ``state(collection, key, value jsonb)`` table.

    Index appends go through the ``append_state_ids`` Postgres function
    (see ``scripts/state_schema.sql``), which performs the concatenation in a
    single UPDATE so concurrent appenders cannot drop each other's IDs.
    """

    def __init__(self, client: Client | None = None) -> None:
        self._client = client or get_supabase_client()

    def get(self, collection: str, key: str) -> Any | None:
        result = (
            self._client.table(STATE_TABLE)
            .select("value")
            .eq("collection", collection)
            .eq("key", key)
            .execute()
        )
        rows = cast(list[dict[str, Any]], result.data)
        if not rows:
            return None
        return rows[0]["value"]

    def set(self, collection: str, key: str, value: Any) -> None:
        (
            self._client.table(STATE_TABLE)
            .upsert(
                {"collection": collection, "key": key, "value": value},
                on_conflict="collection,key",
            )
            .execute()
        )

    def list_group(self, collection: str) -> list[Any]:
        result = (
            self._client.table(STATE_TABLE)
            .select("value")
            .eq("collection", collection)
            .execute()
        )
        rows = cast(list[dict[str, Any]], result.data)
        return [row["value"] for row in rows]

    def append_ids(self, collection: str, key: str, ids: list[str]) -> list[str]:
        result = self._client.rpc(
            "append_state_ids",
            {"p_collection": collection, "p_key": key, "p_ids": ids},
        ).execute()
        return cast(list[str], result.data or [])


def create_state_store(backend: str | None = None) -> StateStore:
    """Build the state store selected by ``STATE_BACKEND``."""
    backend = backend or settings.state_backend
    if backend == "memory":
        return InMemoryStateStore()
    if backend == "supabase":
        return SupabaseStateStore()
    raise ValueError(f"Unknown state backend: {backend!r}")
