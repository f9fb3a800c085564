"""Document store contract.

The store is deliberately ignorant of relations between collections: it
offers per-collection CRUD and counting, plus unique indexes on declared
fields. Referential integrity lives in :mod:`fleet_api.integrity`.

Records are plain dicts of JSON-native values. Every stored record carries
its identity under ``"id"``.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

Record = dict[str, Any]
Filter = Mapping[str, Any]
# (field, direction) pairs; direction 1 = ascending, -1 = descending
Sort = Sequence[tuple[str, int]]

ASCENDING = 1
DESCENDING = -1


class Collection(ABC):
    """A named set of documents."""

    name: str

    @abstractmethod
    async def find(self, filter: Filter | None = None, sort: Sort | None = None) -> list[Record]:
        """Return records whose fields equal every value in ``filter``."""

    @abstractmethod
    async def find_by_id(self, identity: str) -> Record | None:
        """Return the record with this identity, or None."""

    @abstractmethod
    async def insert(self, record: Record) -> Record:
        """Store a new record, assigning an identity if it has none."""

    @abstractmethod
    async def update_by_id(self, identity: str, patch: Mapping[str, Any]) -> Record | None:
        """Merge ``patch`` into the record; return the result or None if absent."""

    @abstractmethod
    async def delete_by_id(self, identity: str) -> Record | None:
        """Remove the record; return what was removed or None if absent."""

    @abstractmethod
    async def count(self, filter: Filter | None = None) -> int:
        """Number of records matching ``filter``."""

    async def exists(self, identity: str) -> bool:
        return await self.find_by_id(identity) is not None


class DocumentStore(ABC):
    """Factory for collections plus lifecycle hooks."""

    def __init__(self, unique_fields: Mapping[str, Sequence[str]] | None = None):
        self.unique_fields: dict[str, tuple[str, ...]] = {
            name: tuple(fields) for name, fields in (unique_fields or {}).items()
        }

    @abstractmethod
    def collection(self, name: str) -> Collection:
        """Return the collection called ``name``."""

    @abstractmethod
    async def ping(self) -> None:
        """Raise StoreError if the backend is unreachable."""

    async def close(self) -> None:
        pass
