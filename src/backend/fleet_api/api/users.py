"""Users API endpoints."""

from fastapi import APIRouter, status
from pydantic import EmailStr, Field, field_validator

from fleet_api.api.common import CamelModel, ERROR_RESPONSES, RecordResponse, dump_create, dump_patch
from fleet_api.core.deps import Users
from fleet_api.core.security import MAX_PASSWORD_BYTES
from fleet_api.models.kinds import UserRole

router = APIRouter()


def check_password_length(value: str | None) -> str | None:
    """bcrypt only hashes the first 72 bytes and rejects longer input."""
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return value


# Request/Response schemas
class UserCreateRequest(CamelModel):
    """Request schema for creating a user."""

    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=1)
    role: UserRole = UserRole.VIEWER

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_length(v)


class UserUpdateRequest(CamelModel):
    """Request schema for updating a user."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=1)
    role: UserRole | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return check_password_length(v)


class UserResponse(RecordResponse):
    """Response schema for user. The password is never part of it."""

    name: str
    email: str
    role: UserRole


# Endpoints
@router.get("", response_model=list[UserResponse])
async def list_users(users: Users) -> list[dict]:
    """List all users."""
    return await users.list()


@router.get("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def get_user(user_id: str, users: Users) -> dict:
    """Get a user by ID."""
    return await users.get(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreateRequest, users: Users) -> dict:
    """Create a new user."""
    return await users.create(dump_create(request))


@router.put("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def update_user(user_id: str, request: UserUpdateRequest, users: Users) -> dict:
    """Update user fields."""
    return await users.update(user_id, dump_patch(request))


@router.delete("/{user_id}", response_model=UserResponse, responses=ERROR_RESPONSES)
async def delete_user(user_id: str, users: Users) -> dict:
    """Delete a user that owns no devices."""
    return await users.delete(user_id)
