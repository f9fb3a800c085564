"""Devices API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Query, status
from pydantic import Field

from fleet_api.api.common import CamelModel, ERROR_RESPONSES, RecordResponse, dump_create, dump_patch
from fleet_api.api.sensors import SensorSummary
from fleet_api.core.deps import Devices
from fleet_api.models.kinds import DeviceStatus

router = APIRouter()


# Request/Response schemas
class DeviceCreateRequest(CamelModel):
    """Request schema for registering a device. Owner and zone must exist."""

    serial_number: str = Field(min_length=1, max_length=100)
    model: str | None = None
    owner_id: str = Field(min_length=1)
    zone_id: str = Field(min_length=1)
    installed_at: datetime | None = None
    status: DeviceStatus = DeviceStatus.ACTIVE
    sensors: list[str] = Field(default_factory=list)


class DeviceUpdateRequest(CamelModel):
    """Request schema for updating a device."""

    serial_number: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = None
    owner_id: str | None = Field(default=None, min_length=1)
    zone_id: str | None = Field(default=None, min_length=1)
    installed_at: datetime | None = None
    status: DeviceStatus | None = None
    sensors: list[str] | None = None


class DeviceOwner(CamelModel):
    id: str
    name: str | None = None
    email: str | None = None


class DeviceZone(CamelModel):
    id: str
    name: str | None = None


class DeviceResponse(RecordResponse):
    """Response schema for device; populated fields appear with ?expand=true."""

    serial_number: str
    model: str | None = None
    owner_id: str
    zone_id: str
    installed_at: datetime
    status: DeviceStatus
    sensors: list[str] = Field(default_factory=list)
    owner: DeviceOwner | None = None
    zone: DeviceZone | None = None
    sensor_details: list[SensorSummary] | None = None


# Endpoints
@router.get("", response_model=list[DeviceResponse], response_model_exclude_unset=True)
async def list_devices(
    devices: Devices,
    expand: bool = Query(False, description="Populate owner, zone and sensors"),
) -> list[dict]:
    """List all devices."""
    return await devices.list(expand=expand)


@router.get(
    "/{device_id}",
    response_model=DeviceResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def get_device(
    device_id: str,
    devices: Devices,
    expand: bool = Query(False, description="Populate owner, zone and sensors"),
) -> dict:
    """Get a device by ID."""
    return await devices.get(device_id, expand=expand)


@router.post(
    "",
    response_model=DeviceResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_device(request: DeviceCreateRequest, devices: Devices) -> dict:
    """Register a new device. Fails with 422 if the owner or zone does not exist."""
    return await devices.create(dump_create(request))


@router.put(
    "/{device_id}",
    response_model=DeviceResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def update_device(device_id: str, request: DeviceUpdateRequest, devices: Devices) -> dict:
    """Update device attributes."""
    return await devices.update(device_id, dump_patch(request))


@router.delete(
    "/{device_id}",
    response_model=DeviceResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def delete_device(device_id: str, devices: Devices) -> dict:
    """Delete a device. Refused with 409 while sensors are still attached."""
    return await devices.delete(device_id)


# ==================== Sensor Assignment ====================


@router.post(
    "/{device_id}/sensors/{sensor_id}",
    response_model=DeviceResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def attach_sensor(device_id: str, sensor_id: str, devices: Devices) -> dict:
    """Attach an existing sensor to a device."""
    return await devices.attach_sensor(device_id, sensor_id)


@router.delete(
    "/{device_id}/sensors/{sensor_id}",
    response_model=DeviceResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def detach_sensor(device_id: str, sensor_id: str, devices: Devices) -> dict:
    """Detach a sensor from a device."""
    return await devices.detach_sensor(device_id, sensor_id)
