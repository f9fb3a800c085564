"""Referential-integrity engine.

Enforces, on top of a document store that has no foreign keys:

- existence of required references when a record is created;
- absence of dependents before a record is deleted;
- population of references for reads.

The engine only reads from the store. Checks and the write that follows them
are separate store calls, so a concurrent writer can slip in between a
dependency count and the delete it allowed. Closing that window needs a
store-level transaction spanning both collections.
"""

from typing import Any, Mapping

import structlog

from fleet_api.core.exceptions import DependentsExistError, MissingReferenceError, NotFoundError
from fleet_api.integrity.registry import Cardinality, Relation, RelationRegistry, registry as default_registry
from fleet_api.models.kinds import EntityKind
from fleet_api.store.base import DocumentStore, Record

logger = structlog.get_logger()


def _project(record: Record, fields: tuple[str, ...] | None) -> Record:
    if fields is None:
        return record
    return {"id": record["id"], **{f: record[f] for f in fields if f in record}}


class IntegrityEngine:
    """Applies a RelationRegistry against a DocumentStore."""

    def __init__(self, store: DocumentStore, registry: RelationRegistry | None = None):
        self.store = store
        self.registry = registry or default_registry

    async def validate_references(self, kind: EntityKind, candidate: Mapping[str, Any]) -> None:
        """Check every required single reference of ``candidate`` resolves.

        Relations are checked in registry order and the first unresolved one
        raises MissingReferenceError.
        """
        for relation in self.registry.required_references(kind):
            identity = candidate.get(relation.field)
            if not identity or not await self.store.collection(relation.target.collection).exists(str(identity)):
                logger.warning(
                    "Unresolved reference",
                    kind=kind.value,
                    field=relation.field,
                    target=relation.target.value,
                    identity=identity,
                )
                raise MissingReferenceError(relation.field, relation.target.value, identity)

    async def check_deletable(
        self,
        kind: EntityKind,
        identity: str,
        record: Mapping[str, Any] | None = None,
    ) -> None:
        """Raise DependentsExistError if deleting ``identity`` would orphan anything.

        RESTRICT relations are counted first, in registry order; then
        SELF_GUARD relations inspect the record's own list. ``record`` is
        loaded from the store when a self-guard needs it and it was not
        supplied.
        """
        for relation in self.registry.restricting(kind):
            count = await self.store.collection(relation.source.collection).count(
                {relation.field: identity}
            )
            if count > 0:
                logger.warning(
                    "Delete blocked by dependents",
                    kind=kind.value,
                    identity=identity,
                    dependent=relation.source.value,
                    field=relation.field,
                    count=count,
                )
                raise DependentsExistError(relation.source.value, relation.field, count)

        guards = self.registry.self_guards(kind)
        if not guards:
            return

        if record is None:
            record = await self.store.collection(kind.collection).find_by_id(identity)
            if record is None:
                raise NotFoundError(kind.value, identity)

        for relation in guards:
            held = record.get(relation.field) or []
            if len(held) > 0:
                logger.warning(
                    "Delete blocked by self-guard",
                    kind=kind.value,
                    identity=identity,
                    field=relation.field,
                    count=len(held),
                )
                raise DependentsExistError(
                    relation.target.value, relation.field, len(held), self_guard=True
                )

    async def expand_references(self, kind: EntityKind, record: Record, full: bool = False) -> Record:
        """Return a copy of ``record`` with expandable references populated.

        A single reference that no longer resolves populates as None; list
        entries that no longer resolve are left out.
        """
        expanded = dict(record)
        for relation in self.registry.expandable(kind):
            fields = None if full else relation.expand_fields
            expanded[relation.expand_as] = await self._resolve(relation, record.get(relation.field), fields)
        return expanded

    async def _resolve(self, relation: Relation, value: Any, fields: tuple[str, ...] | None) -> Any:
        collection = self.store.collection(relation.target.collection)
        if relation.cardinality is Cardinality.MANY:
            resolved = []
            for identity in value or []:
                target = await collection.find_by_id(str(identity))
                if target is not None:
                    resolved.append(_project(target, fields))
            return resolved

        if not value:
            return None
        target = await collection.find_by_id(str(value))
        return _project(target, fields) if target is not None else None
