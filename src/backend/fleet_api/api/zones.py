"""Zones API endpoints."""

from fastapi import APIRouter, status
from pydantic import Field

from fleet_api.api.common import CamelModel, ERROR_RESPONSES, RecordResponse, dump_create, dump_patch
from fleet_api.core.deps import Zones

router = APIRouter()


class ZoneCreateRequest(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    is_active: bool = True


class ZoneUpdateRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    is_active: bool | None = None


class ZoneResponse(RecordResponse):
    name: str
    description: str | None = None
    is_active: bool = True


@router.get("", response_model=list[ZoneResponse])
async def list_zones(zones: Zones) -> list[dict]:
    """List all zones."""
    return await zones.list()


@router.get("/{zone_id}", response_model=ZoneResponse, responses=ERROR_RESPONSES)
async def get_zone(zone_id: str, zones: Zones) -> dict:
    """Get a zone by ID."""
    return await zones.get(zone_id)


@router.post("", response_model=ZoneResponse, status_code=status.HTTP_201_CREATED)
async def create_zone(request: ZoneCreateRequest, zones: Zones) -> dict:
    """Create a new zone."""
    return await zones.create(dump_create(request))


@router.put("/{zone_id}", response_model=ZoneResponse, responses=ERROR_RESPONSES)
async def update_zone(zone_id: str, request: ZoneUpdateRequest, zones: Zones) -> dict:
    """Update zone fields."""
    return await zones.update(zone_id, dump_patch(request))


@router.delete("/{zone_id}", response_model=ZoneResponse, responses=ERROR_RESPONSES)
async def delete_zone(zone_id: str, zones: Zones) -> dict:
    """Delete a zone with no devices assigned."""
    return await zones.delete(zone_id)
