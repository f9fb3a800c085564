"""Schemas shared by the entity routers."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and renders camelCase keys, as stored in the documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordResponse(CamelModel):
    """Fields every stored record carries."""

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ErrorResponse(BaseModel):
    """Body rendered for application errors."""

    success: bool = False
    error: str
    message: str


def dump_create(payload: BaseModel) -> dict:
    """Create payload as a camelCase document."""
    return payload.model_dump(by_alias=True, exclude_none=True)


def dump_patch(payload: BaseModel) -> dict:
    """Only the fields the client actually sent, nulls ignored."""
    return payload.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Record not found"},
}
