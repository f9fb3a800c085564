"""
Relation registry.

Declarative description of every directed reference between entity kinds.
The integrity engine reads it to decide what to check on create, what to
count on delete and what to populate on read.

Invariants:
    - Relations are immutable once registered
    - (source, field) is unique across the registry
    - Registry order is the order in which checks run and errors surface

How to change safely:
    - A new reference is one more ``Relation`` in ``RELATIONS``
    - SELF_GUARD relations must be MANY (the guard inspects a list)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from fleet_api.models.kinds import EntityKind


class Cardinality(str, Enum):
    ONE = "one"
    MANY = "many"


class DeletePolicy(str, Enum):
    """What happens when a referenced record is deleted.

    RESTRICT blocks deleting the target while any source record points at it.
    SELF_GUARD blocks deleting the *source* while its own list is non-empty;
    the target is never guarded.
    """

    RESTRICT = "restrict"
    SELF_GUARD = "self_guard"


@dataclass(frozen=True)
class Relation:
    """A directed reference ``source.field -> target``.

    Attributes:
        source: Kind holding the reference field
        field: Name of the reference field on ``source`` records
        target: Kind the field points at
        cardinality: ONE (single id) or MANY (list of ids)
        required: Whether the reference must resolve when the source is created
        on_delete: Delete policy
        expand_as: Key under which reads populate the referenced record(s)
        expand_fields: Fields kept when populating; None keeps every field
    """

    source: EntityKind
    field: str
    target: EntityKind
    cardinality: Cardinality = Cardinality.ONE
    required: bool = True
    on_delete: DeletePolicy = DeletePolicy.RESTRICT
    expand_as: str | None = None
    expand_fields: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if not self.field:
            raise ValueError("Relation field cannot be empty")
        if self.on_delete is DeletePolicy.SELF_GUARD and self.cardinality is not Cardinality.MANY:
            raise ValueError(f"SELF_GUARD relation {self.name} must have MANY cardinality")

    @property
    def name(self) -> str:
        return f"{self.source.value}.{self.field}"

    @property
    def is_required_single(self) -> bool:
        return self.required and self.cardinality is Cardinality.ONE


class DuplicateRelationError(Exception):
    """Raised when two relations share the same source field."""


class RelationRegistry:
    """Ordered, read-only collection of relations with lookup helpers."""

    def __init__(self, relations: Iterable[Relation]):
        self._relations: tuple[Relation, ...] = tuple(relations)
        seen: set[tuple[EntityKind, str]] = set()
        for relation in self._relations:
            key = (relation.source, relation.field)
            if key in seen:
                raise DuplicateRelationError(f"Relation {relation.name} registered twice")
            seen.add(key)

    def __iter__(self) -> Iterator[Relation]:
        return iter(self._relations)

    def __len__(self) -> int:
        return len(self._relations)

    def outgoing(self, kind: EntityKind) -> list[Relation]:
        """Relations whose source is ``kind``."""
        return [r for r in self._relations if r.source is kind]

    def required_references(self, kind: EntityKind) -> list[Relation]:
        """Required single references that must resolve when ``kind`` is created."""
        return [r for r in self.outgoing(kind) if r.is_required_single]

    def restricting(self, kind: EntityKind) -> list[Relation]:
        """RESTRICT relations that block deleting a ``kind`` record."""
        return [
            r for r in self._relations
            if r.target is kind and r.on_delete is DeletePolicy.RESTRICT
        ]

    def self_guards(self, kind: EntityKind) -> list[Relation]:
        """SELF_GUARD relations evaluated on the ``kind`` record itself."""
        return [r for r in self.outgoing(kind) if r.on_delete is DeletePolicy.SELF_GUARD]

    def expandable(self, kind: EntityKind) -> list[Relation]:
        """Relations of ``kind`` that reads may populate."""
        return [r for r in self.outgoing(kind) if r.expand_as]

    def reference_fields(self, kind: EntityKind) -> set[str]:
        return {r.field for r in self.outgoing(kind)}


RELATIONS: tuple[Relation, ...] = (
    Relation(
        source=EntityKind.DEVICE,
        field="ownerId",
        target=EntityKind.USER,
        expand_as="owner",
        expand_fields=("name", "email"),
    ),
    Relation(
        source=EntityKind.DEVICE,
        field="zoneId",
        target=EntityKind.ZONE,
        expand_as="zone",
        expand_fields=("name",),
    ),
    Relation(
        source=EntityKind.READING,
        field="sensorId",
        target=EntityKind.SENSOR,
        expand_as="sensor",
        expand_fields=("type", "unit", "location"),
    ),
    Relation(
        source=EntityKind.DEVICE,
        field="sensors",
        target=EntityKind.SENSOR,
        cardinality=Cardinality.MANY,
        required=False,
        on_delete=DeletePolicy.SELF_GUARD,
        expand_as="sensorDetails",
    ),
)

registry = RelationRegistry(RELATIONS)
