# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Vault permission endpoints – explicit grants plus "what can I do here".

Grant management (create / update / revoke / list) needs ADMIN on the vault.
``/permissions/me`` and ``/permissions/vaults`` only describe the caller.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from core.security import get_current_user
from models.user import User
from permissions import service
from permissions.schemas import (
    MyPermissionResponse,
    PermissionCreate,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
    UserVaultListResponse,
    UserVaultRow,
)

router = APIRouter(prefix="/permissions", tags=["permissions"])


# ---------------------------------------------------------------------------
# POST /permissions  – grant a user access to a vault
# ---------------------------------------------------------------------------


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
def create_permission(
    body: PermissionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.grant_permission(db, body.vault_id, body.user_id, body.permission, current_user.id)


# ---------------------------------------------------------------------------
# GET /permissions?vault_id=  – explicit grants of a vault
# ---------------------------------------------------------------------------


@router.get("", response_model=PermissionListResponse)
def list_permissions(
    vault_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return PermissionListResponse(
        permissions=service.list_vault_permissions(db, vault_id, current_user.id)
    )


# ---------------------------------------------------------------------------
# GET /permissions/me?vault_id=  – the caller's own level
# ---------------------------------------------------------------------------


@router.get("/me", response_model=MyPermissionResponse)
def my_permission(
    vault_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    level = service.get_user_permission(db, vault_id, current_user.id)
    return MyPermissionResponse(vault_id=vault_id, permission=level.label)


# ---------------------------------------------------------------------------
# GET /permissions/vaults  – every vault the caller reaches, with level
# ---------------------------------------------------------------------------


@router.get("/vaults", response_model=UserVaultListResponse)
def my_vaults(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = service.list_user_vaults(db, current_user.id)
    return UserVaultListResponse(
        vaults=[UserVaultRow(vault=vault, permission=level.label) for vault, level in rows]
    )


# ---------------------------------------------------------------------------
# PUT /permissions/{id}  – change a grant's level (never your own)
# ---------------------------------------------------------------------------


@router.put("/{permission_id}", response_model=PermissionResponse)
def update_permission(
    permission_id: int,
    body: PermissionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.update_permission(db, permission_id, body.permission, current_user.id)


# ---------------------------------------------------------------------------
# DELETE /permissions/{id}  – revoke a grant
# ---------------------------------------------------------------------------


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_permission(
    permission_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.revoke_permission(db, permission_id, current_user.id)
