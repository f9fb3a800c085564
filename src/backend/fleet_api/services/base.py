"""Generic entity service.

Each entity kind gets a subclass that declares its defaults, hidden fields
and ordering; the CRUD flow and the integrity checks live here once.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

import structlog

from fleet_api.core.exceptions import DependentsExistError, MissingReferenceError, NotFoundError
from fleet_api.core.metrics import record_integrity_violation, record_mutation
from fleet_api.integrity.engine import IntegrityEngine
from fleet_api.models.kinds import EntityKind
from fleet_api.store.base import DocumentStore, Record, Sort

logger = structlog.get_logger()


def to_iso(value: datetime) -> str:
    """ISO-8601 in UTC with fixed precision, so strings sort in time order."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def _normalize(data: Mapping[str, Any]) -> dict[str, Any]:
    """Make a payload JSON-native (enums to values, datetimes to ISO strings)."""
    normalized = {}
    for key, value in data.items():
        if isinstance(value, datetime):
            value = to_iso(value)
        elif isinstance(value, Enum):
            value = value.value
        normalized[key] = value
    return normalized


class EntityService:
    """CRUD for one entity kind with referential-integrity guarantees."""

    kind: EntityKind
    # Never returned to callers
    hidden_fields: frozenset[str] = frozenset()
    default_sort: Sort | None = None
    # Populate references in full (instead of the projected fields) on get
    expand_full_on_get: bool = False

    def __init__(
        self,
        store: DocumentStore,
        integrity: IntegrityEngine | None = None,
        validate_references_on_update: bool = False,
    ):
        self.store = store
        self.integrity = integrity or IntegrityEngine(store)
        self.validate_references_on_update = validate_references_on_update
        self.collection = store.collection(self.kind.collection)

    # ==================== Hooks ====================

    def defaults(self) -> dict[str, Any]:
        """Field defaults applied on create; evaluated per call."""
        return {}

    def prepare(self, data: dict[str, Any]) -> dict[str, Any]:
        """Transform an incoming create payload or update patch before storage."""
        return data

    def project(self, record: Record) -> Record:
        """Output projection applied to every record returned."""
        return {k: v for k, v in record.items() if k not in self.hidden_fields}

    # ==================== Reads ====================

    async def list(self, expand: bool = False, **filters: Any) -> list[Record]:
        """List records, optionally filtered by field equality."""
        records = await self.collection.find(_normalize(filters) or None, sort=self.default_sort)
        if expand:
            records = [await self.integrity.expand_references(self.kind, r) for r in records]
        return [self.project(r) for r in records]

    async def get(self, identity: str, expand: bool = False) -> Record:
        """Get a record by id; raises NotFoundError if absent."""
        record = await self.collection.find_by_id(identity)
        if record is None:
            raise NotFoundError(self.kind.value, identity)
        if expand:
            record = await self.integrity.expand_references(
                self.kind, record, full=self.expand_full_on_get
            )
        return self.project(record)

    # ==================== Writes ====================

    async def create(self, data: Mapping[str, Any]) -> Record:
        """Create a record after its required references have been resolved."""
        timestamp = now_iso()
        payload = {k: v for k, v in data.items() if k != "id"}
        record = {
            **self.defaults(),
            **self.prepare(_normalize(payload)),
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }

        await self._guard(self.integrity.validate_references(self.kind, record))

        stored = await self.collection.insert(record)
        record_mutation(self.kind.value, "create")
        logger.info("Entity created", kind=self.kind.value, id=stored["id"])
        return self.project(stored)

    async def update(self, identity: str, patch: Mapping[str, Any]) -> Record:
        """Apply a partial patch.

        Reference fields are not re-validated unless the service was built
        with ``validate_references_on_update``.
        """
        changes = self.prepare(_normalize({k: v for k, v in patch.items() if k != "id"}))

        if self.validate_references_on_update and changes.keys() & self.integrity.registry.reference_fields(self.kind):
            current = await self.collection.find_by_id(identity)
            if current is None:
                raise NotFoundError(self.kind.value, identity)
            await self._guard(
                self.integrity.validate_references(self.kind, {**current, **changes})
            )

        changes["updatedAt"] = now_iso()
        updated = await self.collection.update_by_id(identity, changes)
        if updated is None:
            raise NotFoundError(self.kind.value, identity)
        record_mutation(self.kind.value, "update")
        return self.project(updated)

    async def delete(self, identity: str) -> Record:
        """Delete a record once nothing depends on it.

        The dependency check and the delete are separate store calls; a
        dependent created in between is not detected.
        """
        record = await self.collection.find_by_id(identity)
        if record is None:
            raise NotFoundError(self.kind.value, identity)

        await self._guard(self.integrity.check_deletable(self.kind, identity, record))

        deleted = await self.collection.delete_by_id(identity)
        if deleted is None:
            raise NotFoundError(self.kind.value, identity)
        record_mutation(self.kind.value, "delete")
        logger.info("Entity deleted", kind=self.kind.value, id=identity)
        return self.project(deleted)

    async def _guard(self, check) -> None:
        """Await an integrity check, counting refusals."""
        try:
            await check
        except (MissingReferenceError, DependentsExistError) as e:
            record_integrity_violation(self.kind.value, e.code)
            raise
