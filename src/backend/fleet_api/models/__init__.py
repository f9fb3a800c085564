"""Fleet API models."""

from fleet_api.models.base import Base, TimestampMixin
from fleet_api.models.document import Document, DocumentKey
from fleet_api.models.kinds import (
    COLLECTIONS,
    UNIQUE_FIELDS,
    DeviceStatus,
    EntityKind,
    SensorType,
    UserRole,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "Document",
    "DocumentKey",
    "COLLECTIONS",
    "UNIQUE_FIELDS",
    "EntityKind",
    "UserRole",
    "DeviceStatus",
    "SensorType",
]
