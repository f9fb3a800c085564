"""Pytest configuration and fixtures for fleet API tests."""

import os

# Must be set before fleet_api.core.config is imported
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("METRICS_ENABLED", "true")

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from fleet_api.core.deps import get_store
from fleet_api.main import fastapi_app as app
from fleet_api.models.kinds import UNIQUE_FIELDS
from fleet_api.services import DeviceService, ReadingService, SensorService, UserService, ZoneService
from fleet_api.store.base import DocumentStore
from fleet_api.store.memory import InMemoryDocumentStore
from fleet_api.store.sql import SQLDocumentStore

# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    """Fresh in-memory document store."""
    return InMemoryDocumentStore(UNIQUE_FIELDS)


@asynccontextmanager
async def sqlite_store() -> AsyncIterator[SQLDocumentStore]:
    """SQL document store on a private in-memory SQLite database."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    store = SQLDocumentStore(engine, unique_fields=UNIQUE_FIELDS)
    await store.create_schema()
    try:
        yield store
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SQLDocumentStore, None]:
    async with sqlite_store() as store:
        yield store


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request) -> AsyncGenerator[DocumentStore, None]:
    """Every store implementation in turn."""
    if request.param == "memory":
        yield InMemoryDocumentStore(UNIQUE_FIELDS)
        return
    async with sqlite_store() as sql:
        yield sql


@pytest_asyncio.fixture
async def client(memory_store: InMemoryDocumentStore) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client backed by a fresh in-memory store."""
    app.dependency_overrides[get_store] = lambda: memory_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ==================== Services ====================


@pytest.fixture
def user_service(store: DocumentStore) -> UserService:
    return UserService(store)


@pytest.fixture
def zone_service(store: DocumentStore) -> ZoneService:
    return ZoneService(store)


@pytest.fixture
def device_service(store: DocumentStore) -> DeviceService:
    return DeviceService(store)


@pytest.fixture
def sensor_service(store: DocumentStore) -> SensorService:
    return SensorService(store)


@pytest.fixture
def reading_service(store: DocumentStore) -> ReadingService:
    return ReadingService(store)


# ==================== Records ====================


@pytest_asyncio.fixture
async def test_user(user_service: UserService) -> dict:
    """Create a test user."""
    return await user_service.create({
        "name": "Ana Torres",
        "email": "ana@example.com",
        "password": "s3cret-pass",
        "role": "technician",
    })


@pytest_asyncio.fixture
async def test_zone(zone_service: ZoneService) -> dict:
    """Create a test zone."""
    return await zone_service.create({"name": "North Wing", "description": "Floors 1-3"})


@pytest_asyncio.fixture
async def test_sensor(sensor_service: SensorService) -> dict:
    """Create a test sensor."""
    return await sensor_service.create({
        "type": "temperature",
        "unit": "°C",
        "model": "DHT22",
        "location": "Server room",
    })


@pytest_asyncio.fixture
async def test_device(device_service: DeviceService, test_user: dict, test_zone: dict) -> dict:
    """Create a test device owned by test_user in test_zone."""
    return await device_service.create({
        "serialNumber": "SN-2024-001",
        "model": "ESP32-WROOM",
        "ownerId": test_user["id"],
        "zoneId": test_zone["id"],
    })
