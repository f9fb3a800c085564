"""API Routes Module."""

from fastapi import APIRouter

from fleet_api.api import devices, readings, sensors, users, zones

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(zones.router, prefix="/zones", tags=["Zones"])
router.include_router(devices.router, prefix="/devices", tags=["Devices"])
router.include_router(sensors.router, prefix="/sensors", tags=["Sensors"])
router.include_router(readings.router, prefix="/readings", tags=["Readings"])
