"""User service for user management operations."""

from typing import Any

from fleet_api.core.security import get_password_hash
from fleet_api.models.kinds import EntityKind, UserRole
from fleet_api.services.base import EntityService


class UserService(EntityService):
    """Users own devices. Passwords are stored hashed and never returned."""

    kind = EntityKind.USER
    hidden_fields = frozenset({"password"})

    def defaults(self) -> dict[str, Any]:
        return {"role": UserRole.VIEWER.value}

    def prepare(self, data: dict[str, Any]) -> dict[str, Any]:
        if data.get("email"):
            data["email"] = data["email"].strip().lower()
        if data.get("password"):
            data["password"] = get_password_hash(data["password"])
        return data
