"""IoT Device management service."""

from typing import Any

import structlog

from fleet_api.core.exceptions import MissingReferenceError, NotFoundError
from fleet_api.models.kinds import DeviceStatus, EntityKind
from fleet_api.services.base import EntityService, now_iso
from fleet_api.store.base import Record

logger = structlog.get_logger()


class DeviceService(EntityService):
    """Service for device CRUD and sensor assignment.

    A device must name an existing owner and zone when created, and cannot be
    deleted while its ``sensors`` list still holds sensors.

    Attaching and detaching read the sensor list and write it back as two
    store calls. Two concurrent changes to the same device can therefore
    overwrite each other and lose one of the updates.
    """

    kind = EntityKind.DEVICE

    def defaults(self) -> dict[str, Any]:
        return {
            "installedAt": now_iso(),
            "status": DeviceStatus.ACTIVE.value,
            "sensors": [],
        }

    # ==================== Sensor Assignment ====================

    async def attach_sensor(self, device_id: str, sensor_id: str) -> Record:
        """Append a sensor to the device's list; no-op if already attached."""
        device = await self.collection.find_by_id(device_id)
        if device is None:
            raise NotFoundError(self.kind.value, device_id)

        if not await self.store.collection(EntityKind.SENSOR.collection).exists(sensor_id):
            raise MissingReferenceError("sensors", EntityKind.SENSOR.value, sensor_id)

        sensors = list(device.get("sensors") or [])
        if sensor_id in sensors:
            return self.project(device)

        sensors.append(sensor_id)
        logger.info("Sensor attached", device_id=device_id, sensor_id=sensor_id)
        return await self.update(device_id, {"sensors": sensors})

    async def detach_sensor(self, device_id: str, sensor_id: str) -> Record:
        """Remove a sensor from the device's list."""
        device = await self.collection.find_by_id(device_id)
        if device is None:
            raise NotFoundError(self.kind.value, device_id)

        sensors = list(device.get("sensors") or [])
        if sensor_id not in sensors:
            raise NotFoundError(EntityKind.SENSOR.value, sensor_id)

        sensors.remove(sensor_id)
        logger.info("Sensor detached", device_id=device_id, sensor_id=sensor_id)
        return await self.update(device_id, {"sensors": sensors})
