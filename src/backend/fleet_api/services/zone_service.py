"""Zone service."""

from typing import Any

from fleet_api.models.kinds import EntityKind
from fleet_api.services.base import EntityService


class ZoneService(EntityService):
    """Zones group devices; a zone with devices cannot be deleted."""

    kind = EntityKind.ZONE

    def defaults(self) -> dict[str, Any]:
        return {"isActive": True}
