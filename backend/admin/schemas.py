# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the admin (user management) endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Role = Literal["admin", "user"]


# -- Requests --------------------------------------------------------------


class CreateUserRequest(BaseModel):
    email: str = Field(min_length=3)
    full_name: str = Field(min_length=1)
    password: str = Field(min_length=8)
    role: Role = "user"


class UpdateUserRequest(BaseModel):
    """Partial update; omitted fields are untouched, none may be null."""

    email: Optional[str] = Field(None, min_length=3)
    full_name: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None
    is_active: Optional[bool] = None

    @field_validator("email", "full_name", "role", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ResetPasswordRequest(BaseModel):
    new_password: str = Field(min_length=8)


# -- Responses -------------------------------------------------------------


class UserRow(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserListResponse(BaseModel):
    users: List[UserRow]
