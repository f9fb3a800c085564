"""Error taxonomy shared by the store, the integrity engine and the services."""

from typing import Any


class FleetError(Exception):
    """Base class for all application errors."""

    code = "fleet_error"

    def to_dict(self) -> dict[str, Any]:
        """Details rendered alongside the message in error responses."""
        return {}


class NotFoundError(FleetError):
    """No record exists for the given identity."""

    code = "not_found"

    def __init__(self, kind: str, identity: Any):
        self.kind = kind
        self.identity = identity
        super().__init__(f"{kind} {identity} not found")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "id": self.identity}


class MissingReferenceError(FleetError):
    """A reference field points at a record that does not exist."""

    code = "missing_reference"

    def __init__(self, field: str, target: str, identity: Any):
        self.field = field
        self.target = target
        self.identity = identity
        super().__init__(
            f"Field '{field}' references {target} {identity}, which does not exist"
        )

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "target": self.target, "id": self.identity}


class DependentsExistError(FleetError):
    """Deletion refused while dependents exist.

    For RESTRICT relations ``kind``/``field`` name the dependent collection and
    its reference field. For self-guards they name the guarded record's own
    list field and ``count`` is the list length.
    """

    code = "dependents_exist"

    def __init__(self, kind: str, field: str, count: int, self_guard: bool = False):
        self.kind = kind
        self.field = field
        self.count = count
        self.self_guard = self_guard
        if self_guard:
            message = (
                f"Cannot delete: '{field}' still lists {count} {kind} record(s); "
                f"detach them first"
            )
        else:
            message = (
                f"Cannot delete: {count} {kind} record(s) reference it through "
                f"'{field}'; remove them first"
            )
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "field": self.field,
            "count": self.count,
            "self_guard": self.self_guard,
        }


class StoreError(FleetError):
    """Document store failure (connectivity, constraint, ...)."""

    code = "store_error"


class DuplicateKeyError(StoreError):
    """A unique field value is already taken in the collection."""

    code = "duplicate_key"

    def __init__(self, collection: str, field: str, value: Any):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for '{field}' in {collection}: {value}")

    def to_dict(self) -> dict[str, Any]:
        return {"collection": self.collection, "field": self.field, "value": self.value}
