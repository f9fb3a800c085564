"""Sensors API endpoints."""

from fastapi import APIRouter, status
from pydantic import Field

from fleet_api.api.common import CamelModel, ERROR_RESPONSES, RecordResponse, dump_create, dump_patch
from fleet_api.core.deps import Sensors
from fleet_api.models.kinds import SensorType

router = APIRouter()


class SensorCreateRequest(CamelModel):
    type: SensorType
    unit: str = Field(min_length=1, max_length=50)
    model: str | None = None
    location: str = Field(min_length=1, max_length=200)
    is_active: bool = True


class SensorUpdateRequest(CamelModel):
    type: SensorType | None = None
    unit: str | None = Field(default=None, min_length=1, max_length=50)
    model: str | None = None
    location: str | None = Field(default=None, min_length=1, max_length=200)
    is_active: bool | None = None


class SensorResponse(RecordResponse):
    type: SensorType
    unit: str
    model: str | None = None
    location: str
    is_active: bool = True


class SensorSummary(CamelModel):
    """A sensor as populated into devices and readings."""

    id: str
    type: SensorType | None = None
    unit: str | None = None
    model: str | None = None
    location: str | None = None
    is_active: bool | None = None


@router.get("", response_model=list[SensorResponse])
async def list_sensors(sensors: Sensors) -> list[dict]:
    """List all sensors."""
    return await sensors.list()


@router.get("/{sensor_id}", response_model=SensorResponse, responses=ERROR_RESPONSES)
async def get_sensor(sensor_id: str, sensors: Sensors) -> dict:
    """Get a sensor by ID."""
    return await sensors.get(sensor_id)


@router.post("", response_model=SensorResponse, status_code=status.HTTP_201_CREATED)
async def create_sensor(request: SensorCreateRequest, sensors: Sensors) -> dict:
    """Register a new sensor."""
    return await sensors.create(dump_create(request))


@router.put("/{sensor_id}", response_model=SensorResponse, responses=ERROR_RESPONSES)
async def update_sensor(sensor_id: str, request: SensorUpdateRequest, sensors: Sensors) -> dict:
    """Update sensor fields."""
    return await sensors.update(sensor_id, dump_patch(request))


@router.delete("/{sensor_id}", response_model=SensorResponse, responses=ERROR_RESPONSES)
async def delete_sensor(sensor_id: str, sensors: Sensors) -> dict:
    """Delete a sensor that has no readings."""
    return await sensors.delete(sensor_id)
