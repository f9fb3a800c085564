"""Sensor service."""

from typing import Any

from fleet_api.models.kinds import EntityKind
from fleet_api.services.base import EntityService


class SensorService(EntityService):
    kind = EntityKind.SENSOR

    def defaults(self) -> dict[str, Any]:
        return {"isActive": True}
