"""Referential integrity for the document store."""

from fleet_api.integrity.engine import IntegrityEngine
from fleet_api.integrity.registry import (
    RELATIONS,
    Cardinality,
    DeletePolicy,
    Relation,
    RelationRegistry,
    registry,
)

__all__ = [
    "IntegrityEngine",
    "RELATIONS",
    "Cardinality",
    "DeletePolicy",
    "Relation",
    "RelationRegistry",
    "registry",
]
