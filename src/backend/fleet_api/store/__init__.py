"""Document store implementations."""

from fleet_api.store.base import ASCENDING, DESCENDING, Collection, DocumentStore, Record
from fleet_api.store.memory import InMemoryDocumentStore
from fleet_api.store.sql import SQLDocumentStore

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "Collection",
    "DocumentStore",
    "Record",
    "InMemoryDocumentStore",
    "SQLDocumentStore",
]
