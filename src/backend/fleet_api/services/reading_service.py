"""Reading service for sensor measurements."""

from typing import Any

from fleet_api.models.kinds import EntityKind
from fleet_api.services.base import EntityService, now_iso
from fleet_api.store.base import DESCENDING, Record


class ReadingService(EntityService):
    """Readings belong to a sensor and are listed newest first."""

    kind = EntityKind.READING
    default_sort = (("time", DESCENDING),)
    expand_full_on_get = True

    def defaults(self) -> dict[str, Any]:
        return {"time": now_iso()}

    async def list_by_sensor(self, sensor_id: str) -> list[Record]:
        """Readings of one sensor, most recent first.

        An unknown sensor simply has no readings.
        """
        return await self.list(sensorId=sensor_id)
