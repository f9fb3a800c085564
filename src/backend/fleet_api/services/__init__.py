"""Entity services."""

from fleet_api.services.base import EntityService
from fleet_api.services.device_service import DeviceService
from fleet_api.services.reading_service import ReadingService
from fleet_api.services.sensor_service import SensorService
from fleet_api.services.user_service import UserService
from fleet_api.services.zone_service import ZoneService

__all__ = [
    "EntityService",
    "DeviceService",
    "ReadingService",
    "SensorService",
    "UserService",
    "ZoneService",
]
