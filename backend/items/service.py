# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Credential item manager – CRUD and search over encrypted credential records.

Security invariants enforced by every function
----------------------------------------------
* The caller's level on the owning vault is resolved first: READ for reads,
  WRITE for create / update / delete.  Nothing is loaded into a response or
  written before that check passes.
* Each sensitive field (password, notes, card number, CVV, license key) is
  encrypted on its own with a fresh IV on every write.  Old ciphertext is
  replaced, never patched or reused.
* Responses carry plaintext; the database only ever holds ciphertext.
  Plaintext is never logged.
"""

from sqlalchemy.orm import Session

from core.errors import NotFoundError
from core.logger import get_logger
from core.security import decrypt_value, encrypt_value
from items.schemas import (
    CredentialItemCreate,
    CredentialItemResponse,
    CredentialItemUpdate,
    SearchItemsRequest,
)
from models.category import Category
from models.credential_item import CredentialItem
from models.vault import Vault
from permissions.evaluator import Permission, require_permission

log = get_logger("items")

# request field  →  cipher column
SENSITIVE_FIELDS = {
    "password": "password_encrypted",
    "notes": "notes_encrypted",
    "card_number": "card_number_encrypted",
    "card_cvv": "card_cvv_encrypted",
    "license_key": "license_key_encrypted",
}

# Stored verbatim
PLAIN_FIELDS = (
    "website_url",
    "username",
    "card_holder_name",
    "card_expiry_date",
    "license_email",
)

_LIKE_ESCAPE = "\\"


# ---------------------------------------------------------------------------
# Encryption helpers
# ---------------------------------------------------------------------------


def _seal(value: str | None) -> str | None:
    """Encrypt a populated value; empty and missing values are stored as NULL."""
    return encrypt_value(value) if value else None


def _reveal(item: CredentialItem) -> CredentialItemResponse:
    """Build the API view of *item* with every cipher field decrypted."""
    data = {
        "id": item.id,
        "title": item.title,
        "type": item.type,
        "vault_id": item.vault_id,
        "category_id": item.category_id,
        "created_by": item.created_by,
        "created_at": item.created_at,
        "updated_at": item.updated_at,
    }
    for field in PLAIN_FIELDS:
        data[field] = getattr(item, field)
    for field, column in SENSITIVE_FIELDS.items():
        stored = getattr(item, column)
        data[field] = decrypt_value(stored) if stored else None
    return CredentialItemResponse(**data)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def _load_item(db: Session, item_id: int) -> CredentialItem:
    item = db.query(CredentialItem).filter(CredentialItem.id == item_id).first()
    if item is None:
        raise NotFoundError("Credential item not found")
    return item


def _check_category(db: Session, category_id: int | None, vault_id: int) -> None:
    """A category reference must point into the item's own vault."""
    if category_id is None:
        return
    exists = (
        db.query(Category.id)
        .filter(Category.id == category_id, Category.vault_id == vault_id)
        .first()
    )
    if exists is None:
        raise NotFoundError("Category not found in this vault")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def create_item(db: Session, body: CredentialItemCreate, caller_id: int) -> CredentialItemResponse:
    """Encrypt the supplied secrets and persist a new item."""
    require_permission(db, body.vault_id, caller_id, Permission.WRITE)
    _check_category(db, body.category_id, body.vault_id)

    item = CredentialItem(
        title=body.title,
        type=body.type,
        vault_id=body.vault_id,
        category_id=body.category_id,
        created_by=caller_id,
    )
    for field in PLAIN_FIELDS:
        setattr(item, field, getattr(body, field))
    for field, column in SENSITIVE_FIELDS.items():
        setattr(item, column, _seal(getattr(body, field)))

    db.add(item)
    db.commit()
    db.refresh(item)

    log.info("Item %d (%s) created in vault %d by user %d", item.id, item.type, item.vault_id, caller_id)
    return _reveal(item)


def update_item(
    db: Session,
    item_id: int,
    body: CredentialItemUpdate,
    caller_id: int,
) -> CredentialItemResponse:
    """
    Partial update.  Only fields the client actually sent are applied; a
    sensitive field that was sent is re-encrypted with a new IV.
    """
    item = _load_item(db, item_id)
    require_permission(db, item.vault_id, caller_id, Permission.WRITE)

    changes = body.model_dump(exclude_unset=True)

    if "category_id" in changes:
        _check_category(db, changes["category_id"], item.vault_id)
        item.category_id = changes["category_id"]
    if "title" in changes:
        item.title = changes["title"]
    for field in PLAIN_FIELDS:
        if field in changes:
            setattr(item, field, changes[field])
    for field, column in SENSITIVE_FIELDS.items():
        if field in changes:
            setattr(item, column, _seal(changes[field]))

    db.commit()
    db.refresh(item)

    # Field names only – values may be secrets
    log.info("Item %d updated by user %d (%s)", item_id, caller_id, ", ".join(sorted(changes)) or "no changes")
    return _reveal(item)


def get_item(db: Session, item_id: int, caller_id: int) -> CredentialItemResponse:
    item = _load_item(db, item_id)
    require_permission(db, item.vault_id, caller_id, Permission.READ)
    return _reveal(item)


def list_vault_items(db: Session, vault_id: int, caller_id: int) -> list[CredentialItemResponse]:
    require_permission(db, vault_id, caller_id, Permission.READ)
    items = (
        db.query(CredentialItem)
        .filter(CredentialItem.vault_id == vault_id)
        .order_by(CredentialItem.id)
        .all()
    )
    return [_reveal(item) for item in items]


def search_items(db: Session, filters: SearchItemsRequest, caller_id: int) -> list[CredentialItemResponse]:
    """
    Filter items; every supplied condition is ANDed.

    * ``vault_id`` given   → READ on that vault is required.
    * ``vault_id`` omitted → only vaults the caller *owns* are searched.
      Vaults reached through a grant must be searched by id.
    * ``category_id`` explicitly null → uncategorised items only.
    * ``query`` matches the title only, case-insensitive substring.
    """
    q = db.query(CredentialItem)

    if filters.vault_id is not None:
        require_permission(db, filters.vault_id, caller_id, Permission.READ)
        q = q.filter(CredentialItem.vault_id == filters.vault_id)
    else:
        owned_ids = [
            vault_id for (vault_id,) in db.query(Vault.id).filter(Vault.owner_id == caller_id).all()
        ]
        if not owned_ids:
            return []
        q = q.filter(CredentialItem.vault_id.in_(owned_ids))

    if "category_id" in filters.model_fields_set:
        if filters.category_id is None:
            q = q.filter(CredentialItem.category_id.is_(None))
        else:
            q = q.filter(CredentialItem.category_id == filters.category_id)

    if filters.type is not None:
        q = q.filter(CredentialItem.type == filters.type)

    term = (filters.query or "").strip()
    if term:
        # Treat % and _ in the user's text literally
        escaped = (
            term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
            .replace("%", _LIKE_ESCAPE + "%")
            .replace("_", _LIKE_ESCAPE + "_")
        )
        q = q.filter(CredentialItem.title.ilike(f"%{escaped}%", escape=_LIKE_ESCAPE))

    return [_reveal(item) for item in q.order_by(CredentialItem.id).all()]


def delete_item(db: Session, item_id: int, caller_id: int) -> None:
    """Permanently delete an item."""
    item = _load_item(db, item_id)
    require_permission(db, item.vault_id, caller_id, Permission.WRITE)

    vault_id = item.vault_id
    db.delete(item)
    db.commit()

    log.info("Item %d deleted from vault %d by user %d", item_id, vault_id, caller_id)
