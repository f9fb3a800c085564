"""Readings API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Query, status
from pydantic import FiniteFloat

from fleet_api.api.common import CamelModel, ERROR_RESPONSES, RecordResponse, dump_create, dump_patch
from fleet_api.api.sensors import SensorSummary
from fleet_api.core.deps import Readings

router = APIRouter()


class ReadingCreateRequest(CamelModel):
    sensor_id: str
    time: datetime | None = None
    value: FiniteFloat


class ReadingUpdateRequest(CamelModel):
    sensor_id: str | None = None
    time: datetime | None = None
    value: FiniteFloat | None = None


class ReadingResponse(RecordResponse):
    sensor_id: str
    time: datetime
    value: float
    sensor: SensorSummary | None = None


@router.get("", response_model=list[ReadingResponse], response_model_exclude_unset=True)
async def list_readings(
    readings: Readings,
    expand: bool = Query(False, description="Populate the sensor of each reading"),
) -> list[dict]:
    """List all readings, most recent first."""
    return await readings.list(expand=expand)


@router.get("/sensor/{sensor_id}", response_model=list[ReadingResponse], response_model_exclude_unset=True)
async def list_readings_by_sensor(sensor_id: str, readings: Readings) -> list[dict]:
    """Readings of one sensor, most recent first."""
    return await readings.list_by_sensor(sensor_id)


@router.get(
    "/{reading_id}",
    response_model=ReadingResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def get_reading(
    reading_id: str,
    readings: Readings,
    expand: bool = Query(False, description="Populate the sensor"),
) -> dict:
    """Get a reading by ID."""
    return await readings.get(reading_id, expand=expand)


@router.post(
    "",
    response_model=ReadingResponse,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_reading(request: ReadingCreateRequest, readings: Readings) -> dict:
    """Record a reading. Fails with 422 if the sensor does not exist."""
    return await readings.create(dump_create(request))


@router.put(
    "/{reading_id}",
    response_model=ReadingResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def update_reading(reading_id: str, request: ReadingUpdateRequest, readings: Readings) -> dict:
    """Update a reading."""
    return await readings.update(reading_id, dump_patch(request))


@router.delete(
    "/{reading_id}",
    response_model=ReadingResponse,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def delete_reading(reading_id: str, readings: Readings) -> dict:
    """Delete a reading."""
    return await readings.delete(reading_id)
