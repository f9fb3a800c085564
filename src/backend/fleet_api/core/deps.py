"""Dependency injection utilities for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import create_async_engine

from fleet_api.core.config import Settings, settings
from fleet_api.models.kinds import UNIQUE_FIELDS
from fleet_api.services import DeviceService, ReadingService, SensorService, UserService, ZoneService
from fleet_api.store.base import DocumentStore
from fleet_api.store.memory import InMemoryDocumentStore
from fleet_api.store.sql import SQLDocumentStore

# Document store singleton
_store: DocumentStore | None = None


def build_store(config: Settings) -> DocumentStore:
    """Create the document store selected by ``store_backend``."""
    if config.store_backend == "memory":
        return InMemoryDocumentStore(UNIQUE_FIELDS)
    engine = create_async_engine(config.database_url, echo=config.debug)
    return SQLDocumentStore(engine, unique_fields=UNIQUE_FIELDS)


def get_store() -> DocumentStore:
    """Get the document store singleton."""
    global _store
    if _store is None:
        _store = build_store(settings)
    return _store


async def close_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None


Store = Annotated[DocumentStore, Depends(get_store)]


def get_user_service(store: Store) -> UserService:
    return UserService(store, validate_references_on_update=settings.validate_references_on_update)


def get_zone_service(store: Store) -> ZoneService:
    return ZoneService(store, validate_references_on_update=settings.validate_references_on_update)


def get_device_service(store: Store) -> DeviceService:
    return DeviceService(store, validate_references_on_update=settings.validate_references_on_update)


def get_sensor_service(store: Store) -> SensorService:
    return SensorService(store, validate_references_on_update=settings.validate_references_on_update)


def get_reading_service(store: Store) -> ReadingService:
    return ReadingService(store, validate_references_on_update=settings.validate_references_on_update)


Users = Annotated[UserService, Depends(get_user_service)]
Zones = Annotated[ZoneService, Depends(get_zone_service)]
Devices = Annotated[DeviceService, Depends(get_device_service)]
Sensors = Annotated[SensorService, Depends(get_sensor_service)]
Readings = Annotated[ReadingService, Depends(get_reading_service)]
