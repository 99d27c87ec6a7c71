# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Credential item endpoints – CRUD and search.

Security invariants enforced by every handler
---------------------------------------------
* JWT is required on every endpoint (via ``get_current_user``).
* The caller's level on the item's vault is checked before anything is
  read or written: READ for GET / search, WRITE for POST / PUT / DELETE.
* Request and response bodies carry plaintext secrets; only ciphertext is
  stored.  Nothing here logs a secret.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_db
from core.security import get_current_user
from models.user import User
from items import service
from items.schemas import (
    CredentialItemCreate,
    CredentialItemListResponse,
    CredentialItemResponse,
    CredentialItemUpdate,
    SearchItemsRequest,
)

router = APIRouter(prefix="/items", tags=["items"])


# ---------------------------------------------------------------------------
# GET /items?vault_id=  – every item of a vault
# ---------------------------------------------------------------------------


@router.get("", response_model=CredentialItemListResponse)
def list_items(
    vault_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CredentialItemListResponse(items=service.list_vault_items(db, vault_id, current_user.id))


# ---------------------------------------------------------------------------
# POST /items  – create
# ---------------------------------------------------------------------------


@router.post("", response_model=CredentialItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    body: CredentialItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.create_item(db, body, current_user.id)


# ---------------------------------------------------------------------------
# POST /items/search
# ---------------------------------------------------------------------------
# A JSON body rather than query params so that ``"category_id": null`` (only
# uncategorised items) can be told apart from leaving the filter out.


@router.post("/search", response_model=CredentialItemListResponse)
def search_items(
    body: SearchItemsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CredentialItemListResponse(items=service.search_items(db, body, current_user.id))


# ---------------------------------------------------------------------------
# GET /items/{id}
# ---------------------------------------------------------------------------


@router.get("/{item_id}", response_model=CredentialItemResponse)
def get_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return service.get_item(db, item_id, current_user.id)


# ---------------------------------------------------------------------------
# PUT /items/{id}  – partial update
# ---------------------------------------------------------------------------


@router.put("/{item_id}", response_model=CredentialItemResponse)
def update_item(
    item_id: int,
    body: CredentialItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Only fields present in the body change.  A secret that is sent is
    re-encrypted with a fresh IV; sending it as null clears it.
    """
    return service.update_item(db, item_id, body, current_user.id)


# ---------------------------------------------------------------------------
# DELETE /items/{id}
# ---------------------------------------------------------------------------


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service.delete_item(db, item_id, current_user.id)
