"""Tests for the document store implementations (memory and SQL)."""

import pytest

from fleet_api.core.exceptions import DuplicateKeyError
from fleet_api.store.base import ASCENDING, DESCENDING, DocumentStore


class TestDocumentStore:
    """Contract tests run against every store."""

    @pytest.mark.asyncio
    async def test_insert_assigns_identity(self, store: DocumentStore):
        zones = store.collection("zones")

        record = await zones.insert({"name": "Lobby", "isActive": True})

        assert record["id"]
        assert record["name"] == "Lobby"
        assert await zones.find_by_id(record["id"]) == record

    @pytest.mark.asyncio
    async def test_insert_keeps_given_identity(self, store: DocumentStore):
        zones = store.collection("zones")
        record = await zones.insert({"id": "zone-1", "name": "Lobby"})
        assert record["id"] == "zone-1"
        assert (await zones.find_by_id("zone-1"))["name"] == "Lobby"

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, store: DocumentStore):
        assert await store.collection("zones").find_by_id("nope") is None

    @pytest.mark.asyncio
    async def test_collections_are_isolated(self, store: DocumentStore):
        zone = await store.collection("zones").insert({"name": "Lobby"})

        assert await store.collection("sensors").find_by_id(zone["id"]) is None
        assert await store.collection("sensors").count() == 0
        assert await store.collection("zones").count() == 1

    @pytest.mark.asyncio
    async def test_find_and_count_by_filter(self, store: DocumentStore):
        devices = store.collection("devices")
        await devices.insert({"serialNumber": "A", "ownerId": "u1", "status": "active"})
        await devices.insert({"serialNumber": "B", "ownerId": "u1", "status": "offline"})
        await devices.insert({"serialNumber": "C", "ownerId": "u2", "status": "active"})

        assert await devices.count({"ownerId": "u1"}) == 2
        assert await devices.count({"ownerId": "u1", "status": "active"}) == 1
        assert await devices.count({"ownerId": "u3"}) == 0
        assert await devices.count() == 3

        found = await devices.find({"ownerId": "u2"})
        assert [d["serialNumber"] for d in found] == ["C"]

    @pytest.mark.asyncio
    async def test_filter_on_boolean_and_number(self, store: DocumentStore):
        sensors = store.collection("sensors")
        await sensors.insert({"location": "a", "isActive": True, "floor": 1})
        await sensors.insert({"location": "b", "isActive": False, "floor": 2})

        assert [s["location"] for s in await sensors.find({"isActive": False})] == ["b"]
        assert [s["location"] for s in await sensors.find({"floor": 1})] == ["a"]

    @pytest.mark.asyncio
    async def test_find_sorted(self, store: DocumentStore):
        readings = store.collection("readings")
        for time in ("2026-01-02T00:00:00.000000+00:00", "2026-01-03T00:00:00.000000+00:00", "2026-01-01T00:00:00.000000+00:00"):
            await readings.insert({"sensorId": "s1", "time": time})

        newest_first = await readings.find({"sensorId": "s1"}, sort=[("time", DESCENDING)])
        oldest_first = await readings.find({"sensorId": "s1"}, sort=[("time", ASCENDING)])

        assert [r["time"][:10] for r in newest_first] == ["2026-01-03", "2026-01-02", "2026-01-01"]
        assert [r["time"][:10] for r in oldest_first] == ["2026-01-01", "2026-01-02", "2026-01-03"]

    @pytest.mark.asyncio
    async def test_update_merges_patch(self, store: DocumentStore):
        zones = store.collection("zones")
        zone = await zones.insert({"name": "Lobby", "isActive": True})

        updated = await zones.update_by_id(zone["id"], {"isActive": False})

        assert updated == {"id": zone["id"], "name": "Lobby", "isActive": False}
        assert await zones.find_by_id(zone["id"]) == updated

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, store: DocumentStore):
        assert await store.collection("zones").update_by_id("nope", {"name": "x"}) is None

    @pytest.mark.asyncio
    async def test_delete_returns_removed_record(self, store: DocumentStore):
        zones = store.collection("zones")
        zone = await zones.insert({"name": "Lobby"})

        removed = await zones.delete_by_id(zone["id"])

        assert removed == zone
        assert await zones.find_by_id(zone["id"]) is None
        assert await zones.delete_by_id(zone["id"]) is None

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store: DocumentStore):
        devices = store.collection("devices")
        device = await devices.insert({"serialNumber": "A", "sensors": ["s1"]})

        device["sensors"].append("s2")

        assert (await devices.find_by_id(device["id"]))["sensors"] == ["s1"]

    # ==================== Unique indexes ====================

    @pytest.mark.asyncio
    async def test_unique_field_on_insert(self, store: DocumentStore):
        users = store.collection("users")
        await users.insert({"email": "ana@example.com"})

        with pytest.raises(DuplicateKeyError) as exc_info:
            await users.insert({"email": "ana@example.com"})

        assert exc_info.value.field == "email"
        assert exc_info.value.collection == "users"
        assert await users.count() == 1

    @pytest.mark.asyncio
    async def test_unique_field_on_update(self, store: DocumentStore):
        devices = store.collection("devices")
        await devices.insert({"serialNumber": "SN-1"})
        second = await devices.insert({"serialNumber": "SN-2"})

        with pytest.raises(DuplicateKeyError):
            await devices.update_by_id(second["id"], {"serialNumber": "SN-1"})

        assert (await devices.find_by_id(second["id"]))["serialNumber"] == "SN-2"

    @pytest.mark.asyncio
    async def test_unique_value_reusable_after_change_or_delete(self, store: DocumentStore):
        devices = store.collection("devices")
        first = await devices.insert({"serialNumber": "SN-1"})

        # Re-saving the same value is not a collision
        await devices.update_by_id(first["id"], {"serialNumber": "SN-1", "model": "X"})

        await devices.update_by_id(first["id"], {"serialNumber": "SN-9"})
        second = await devices.insert({"serialNumber": "SN-1"})

        await devices.delete_by_id(second["id"])
        third = await devices.insert({"serialNumber": "SN-1"})
        assert third["serialNumber"] == "SN-1"

    @pytest.mark.asyncio
    async def test_unindexed_collection_allows_duplicates(self, store: DocumentStore):
        zones = store.collection("zones")
        await zones.insert({"name": "Lobby"})
        await zones.insert({"name": "Lobby"})
        assert await zones.count({"name": "Lobby"}) == 2

    @pytest.mark.asyncio
    async def test_ping(self, store: DocumentStore):
        await store.ping()
