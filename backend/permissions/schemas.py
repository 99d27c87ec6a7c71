# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the vault permission endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from vaults.schemas import VaultResponse

GrantLevel = Literal["read", "write", "admin"]


# -- Requests --------------------------------------------------------------


class PermissionCreate(BaseModel):
    vault_id: int
    user_id: int
    permission: GrantLevel


class PermissionUpdate(BaseModel):
    permission: GrantLevel


# -- Responses -------------------------------------------------------------


class PermissionResponse(BaseModel):
    id: int
    vault_id: int
    user_id: int
    permission: str
    granted_by: int
    created_at: datetime

    model_config = {"from_attributes": True}


class PermissionListResponse(BaseModel):
    permissions: List[PermissionResponse]


class MyPermissionResponse(BaseModel):
    vault_id: int
    # "owner" / "admin" / "write" / "read", or null for no access
    permission: Optional[str]


class UserVaultRow(BaseModel):
    vault: VaultResponse
    permission: str


class UserVaultListResponse(BaseModel):
    vaults: List[UserVaultRow]
