"""
In-memory document store.

Used by the test suite and for local runs without a database
(``STORE_BACKEND=memory``).

Invariants:
    - All data is lost on process exit
    - Records are deep-copied on the way in and out, so callers never
      share state with the store
    - Unique-field checks and the write they guard run under one lock
"""

import asyncio
import copy
import uuid
from collections import defaultdict
from typing import Any, Mapping, Sequence

from fleet_api.core.exceptions import DuplicateKeyError
from fleet_api.store.base import Collection, DocumentStore, Filter, Record, Sort


def _matches(record: Record, filter: Filter | None) -> bool:
    if not filter:
        return True
    return all(record.get(field) == value for field, value in filter.items())


def _sorted(records: list[Record], sort: Sort | None) -> list[Record]:
    # Stable sorts applied from the least to the most significant key
    for field, direction in reversed(list(sort or ())):
        records.sort(
            key=lambda r: (r.get(field) is not None, r.get(field)),
            reverse=direction < 0,
        )
    return records


class InMemoryCollection(Collection):
    """Collection backed by an insertion-ordered dict."""

    def __init__(self, name: str, documents: dict[str, Record], unique_fields: tuple[str, ...], lock: asyncio.Lock):
        self.name = name
        self._documents = documents
        self._unique_fields = unique_fields
        self._lock = lock

    async def find(self, filter: Filter | None = None, sort: Sort | None = None) -> list[Record]:
        records = [copy.deepcopy(r) for r in self._documents.values() if _matches(r, filter)]
        return _sorted(records, sort)

    async def find_by_id(self, identity: str) -> Record | None:
        record = self._documents.get(identity)
        return copy.deepcopy(record) if record is not None else None

    async def insert(self, record: Record) -> Record:
        async with self._lock:
            stored = copy.deepcopy(record)
            stored["id"] = stored.get("id") or str(uuid.uuid4())
            self._check_unique(stored, exclude=None)
            self._documents[stored["id"]] = stored
            return copy.deepcopy(stored)

    async def update_by_id(self, identity: str, patch: Mapping[str, Any]) -> Record | None:
        async with self._lock:
            current = self._documents.get(identity)
            if current is None:
                return None
            updated = {**current, **copy.deepcopy(dict(patch)), "id": identity}
            self._check_unique(updated, exclude=identity)
            self._documents[identity] = updated
            return copy.deepcopy(updated)

    async def delete_by_id(self, identity: str) -> Record | None:
        async with self._lock:
            return self._documents.pop(identity, None)

    async def count(self, filter: Filter | None = None) -> int:
        return sum(1 for r in self._documents.values() if _matches(r, filter))

    def _check_unique(self, record: Record, exclude: str | None) -> None:
        for field in self._unique_fields:
            value = record.get(field)
            if value is None:
                continue
            for other_id, other in self._documents.items():
                if other_id != exclude and other.get(field) == value:
                    raise DuplicateKeyError(self.name, field, value)


class InMemoryDocumentStore(DocumentStore):
    """DocumentStore keeping every collection in process memory.

    Example:
        >>> store = InMemoryDocumentStore({"users": ("email",)})
        >>> user = await store.collection("users").insert({"email": "a@b.io"})
        >>> await store.collection("users").count({"email": "a@b.io"})
        1
    """

    def __init__(self, unique_fields: Mapping[str, Sequence[str]] | None = None):
        super().__init__(unique_fields)
        self._data: dict[str, dict[str, Record]] = defaultdict(dict)
        self._lock = asyncio.Lock()

    def collection(self, name: str) -> InMemoryCollection:
        return InMemoryCollection(
            name,
            self._data[name],
            self.unique_fields.get(name, ()),
            self._lock,
        )

    async def ping(self) -> None:
        return None

    def clear(self) -> None:
        self._data.clear()
