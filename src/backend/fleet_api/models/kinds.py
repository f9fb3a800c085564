"""Entity kinds, their collections and field enumerations."""

from enum import Enum


class EntityKind(str, Enum):
    """The five kinds of record managed by the API."""

    USER = "User"
    ZONE = "Zone"
    DEVICE = "Device"
    SENSOR = "Sensor"
    READING = "Reading"

    @property
    def collection(self) -> str:
        return COLLECTIONS[self]


COLLECTIONS: dict[EntityKind, str] = {
    EntityKind.USER: "users",
    EntityKind.ZONE: "zones",
    EntityKind.DEVICE: "devices",
    EntityKind.SENSOR: "sensors",
    EntityKind.READING: "readings",
}

# Unique indexes declared on the document store, per collection
UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {
    "users": ("email",),
    "devices": ("serialNumber",),
}


class UserRole(str, Enum):
    """User roles."""

    ADMIN = "admin"
    TECHNICIAN = "technician"
    VIEWER = "viewer"


class DeviceStatus(str, Enum):
    """Device operational status."""

    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


class SensorType(str, Enum):
    """Sensor measurement type."""

    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    CO2 = "co2"
    NOISE = "noise"
