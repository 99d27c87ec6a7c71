# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the vault endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# -- Requests --------------------------------------------------------------


class VaultCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    is_shared: bool = False


class VaultUpdate(BaseModel):
    """
    Partial update.  Omitted fields are untouched; ``description: null``
    clears the description.  ``name`` and ``is_shared`` cannot be null.
    """

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    is_shared: Optional[bool] = None

    @field_validator("name", "is_shared")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


# -- Responses -------------------------------------------------------------


class VaultResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    owner_id: int
    is_shared: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VaultListResponse(BaseModel):
    vaults: List[VaultResponse]
