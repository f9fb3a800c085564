"""Tests for user service."""

import pytest

from fleet_api.core.exceptions import DependentsExistError, DuplicateKeyError, NotFoundError
from fleet_api.core.security import verify_password
from fleet_api.services import DeviceService, UserService
from fleet_api.store.base import DocumentStore


class TestUserService:
    """Tests for UserService."""

    @pytest.mark.asyncio
    async def test_create_user_defaults_and_hides_password(self, user_service: UserService):
        user = await user_service.create({
            "name": "Luis",
            "email": "Luis@Example.com",
            "password": "plain-text",
        })

        assert user["id"]
        assert user["role"] == "viewer"
        assert user["email"] == "luis@example.com"
        assert user["createdAt"] == user["updatedAt"]
        assert "password" not in user

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, user_service: UserService, store: DocumentStore, test_user: dict):
        stored = await store.collection("users").find_by_id(test_user["id"])

        assert stored["password"] != "s3cret-pass"
        assert verify_password("s3cret-pass", stored["password"])

    @pytest.mark.asyncio
    async def test_reads_never_include_password(self, user_service: UserService, test_user: dict):
        await user_service.create({"name": "Luis", "email": "luis@example.com", "password": "x"})

        listed = await user_service.list()
        fetched = await user_service.get(test_user["id"])

        assert len(listed) == 2
        assert all("password" not in u for u in listed)
        assert "password" not in fetched

    @pytest.mark.asyncio
    async def test_duplicate_email(self, user_service: UserService, test_user: dict):
        with pytest.raises(DuplicateKeyError) as exc_info:
            await user_service.create({
                "name": "Other",
                "email": "ANA@example.com",
                "password": "x",
            })
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_update_user(self, user_service: UserService, store: DocumentStore, test_user: dict):
        updated = await user_service.update(test_user["id"], {"role": "admin", "password": "new-pass"})

        assert updated["role"] == "admin"
        assert updated["name"] == "Ana Torres"
        assert "password" not in updated
        stored = await store.collection("users").find_by_id(test_user["id"])
        assert verify_password("new-pass", stored["password"])

    @pytest.mark.asyncio
    async def test_update_missing_user(self, user_service: UserService):
        with pytest.raises(NotFoundError):
            await user_service.update("ghost", {"name": "x"})

    @pytest.mark.asyncio
    async def test_get_missing_user(self, user_service: UserService):
        with pytest.raises(NotFoundError) as exc_info:
            await user_service.get("ghost")
        assert exc_info.value.kind == "User"

    @pytest.mark.asyncio
    async def test_delete_user_without_devices(self, user_service: UserService, test_user: dict):
        deleted = await user_service.delete(test_user["id"])

        assert deleted["id"] == test_user["id"]
        assert "password" not in deleted
        with pytest.raises(NotFoundError):
            await user_service.get(test_user["id"])

    @pytest.mark.asyncio
    async def test_delete_user_owning_devices(
        self,
        user_service: UserService,
        device_service: DeviceService,
        test_user: dict,
        test_device: dict,
    ):
        with pytest.raises(DependentsExistError) as exc_info:
            await user_service.delete(test_user["id"])

        assert exc_info.value.count == 1
        assert (await user_service.get(test_user["id"]))["id"] == test_user["id"]

        await device_service.delete(test_device["id"])
        await user_service.delete(test_user["id"])

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, user_service: UserService):
        with pytest.raises(NotFoundError):
            await user_service.delete("ghost")
