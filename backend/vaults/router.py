# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Vault endpoints – create, list, read, update and delete vaults.

Access rules (enforced in vaults.service)
-----------------------------------------
* Any authenticated user may create a vault and becomes its owner.
* Update needs ADMIN on the vault (owner or an explicit admin grant).
* Delete is owner-only and answers 404 for both "missing" and "not yours".
* Reading a vault the caller cannot see also answers 404.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from core.security import get_current_user
from models.user import User
from vaults import service
from vaults.schemas import VaultCreate, VaultListResponse, VaultResponse, VaultUpdate

router = APIRouter(prefix="/vaults", tags=["vaults"])


# ---------------------------------------------------------------------------
# POST /vaults  – create a vault (with default categories)
# ---------------------------------------------------------------------------


@router.post("", response_model=VaultResponse, status_code=status.HTTP_201_CREATED)
def create_vault(
    body: VaultCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.create_vault(db, body.name, body.description, body.is_shared, current_user.id)


# ---------------------------------------------------------------------------
# GET /vaults  – vaults the caller owns or was granted
# ---------------------------------------------------------------------------


@router.get("", response_model=VaultListResponse)
def list_vaults(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return VaultListResponse(vaults=service.list_vaults_for_user(db, current_user.id))


# ---------------------------------------------------------------------------
# GET /vaults/{id}
# ---------------------------------------------------------------------------


@router.get("/{vault_id}", response_model=VaultResponse)
def get_vault(
    vault_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.get_vault(db, vault_id, current_user.id)


# ---------------------------------------------------------------------------
# PUT /vaults/{id}  – partial update
# ---------------------------------------------------------------------------


@router.put("/{vault_id}", response_model=VaultResponse)
def update_vault(
    vault_id: int,
    body: VaultUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Only the fields present in the JSON body are changed."""
    return service.update_vault(db, vault_id, body.model_dump(exclude_unset=True), current_user.id)


# ---------------------------------------------------------------------------
# DELETE /vaults/{id}  – owner-only, cascades to items/categories/grants
# ---------------------------------------------------------------------------


@router.delete("/{vault_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vault(
    vault_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_vault(db, vault_id, current_user.id)
