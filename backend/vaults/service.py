# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Vault lifecycle – create, update, delete, look up.

Transaction boundaries
----------------------
``create_vault`` (vault + default categories) and ``delete_vault`` (items →
categories → grants → vault) each commit exactly once.  On any exception the
session is rolled back, so no reader ever sees a vault without its
categories or a half-deleted vault.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.errors import NotFoundError, VaultNotFoundOrForbiddenError
from core.logger import get_logger
from models.category import Category
from models.credential_item import CredentialItem
from models.vault import Vault
from models.vault_permission import VaultUserPermission
from permissions.evaluator import Permission, permission_for, require_permission

log = get_logger("vaults")

DEFAULT_CATEGORIES = (
    ("Personal", "Personal accounts and services", "#4F46E5"),
    ("Work", "Work-related accounts", "#059669"),
    ("Banking", "Banking and financial accounts", "#DC2626"),
    ("Social", "Social media accounts", "#7C2D12"),
)

# Fields a vault update may touch
_UPDATABLE = ("name", "description", "is_shared")


def create_vault(
    db: Session,
    name: str,
    description: str | None,
    is_shared: bool,
    owner_id: int,
) -> Vault:
    """
    Insert a vault owned by *owner_id* together with the default categories.

    The owner gets no grant row: ``owner_id`` alone makes them OWNER, and
    there is nothing anyone could revoke.
    """
    vault = Vault(name=name, description=description, is_shared=is_shared, owner_id=owner_id)
    try:
        db.add(vault)
        db.flush()  # get vault.id before the categories reference it
        for cat_name, cat_description, color in DEFAULT_CATEGORIES:
            db.add(Category(
                name=cat_name,
                description=cat_description,
                color=color,
                vault_id=vault.id,
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(vault)

    log.info("Vault %d created by user %d", vault.id, owner_id)
    return vault


def update_vault(db: Session, vault_id: int, changes: dict, caller_id: int) -> Vault:
    """
    Partial update.  Only keys present in *changes* are applied; a key with
    value ``None`` clears that column.
    """
    require_permission(db, vault_id, caller_id, Permission.ADMIN)
    vault = db.query(Vault).filter(Vault.id == vault_id).first()

    for field in _UPDATABLE:
        if field in changes:
            setattr(vault, field, changes[field])
    db.commit()
    db.refresh(vault)
    return vault


def delete_vault(db: Session, vault_id: int, caller_id: int) -> None:
    """
    Owner-only hard delete with cascade.

    A missing vault and a vault owned by someone else produce the same error
    so non-owners learn nothing about which ids exist.
    """
    vault = (
        db.query(Vault)
        .filter(Vault.id == vault_id, Vault.owner_id == caller_id)
        .first()
    )
    if vault is None:
        raise VaultNotFoundOrForbiddenError("Vault not found or insufficient permissions")

    try:
        # Dependency order: items reference categories, everything references the vault
        items = (
            db.query(CredentialItem)
            .filter(CredentialItem.vault_id == vault_id)
            .delete(synchronize_session=False)
        )
        db.query(Category).filter(Category.vault_id == vault_id).delete(synchronize_session=False)
        db.query(VaultUserPermission).filter(
            VaultUserPermission.vault_id == vault_id
        ).delete(synchronize_session=False)
        db.delete(vault)
        db.commit()
    except Exception:
        db.rollback()
        raise

    log.info("Vault %d deleted by owner %d (%d item(s) removed)", vault_id, caller_id, items)


def list_vaults_for_user(db: Session, user_id: int) -> list[Vault]:
    """Vaults *user_id* owns or holds a grant on, each once, by id."""
    granted_ids = select(VaultUserPermission.vault_id).where(
        VaultUserPermission.user_id == user_id
    )
    return (
        db.query(Vault)
        .filter((Vault.owner_id == user_id) | Vault.id.in_(granted_ids))
        .order_by(Vault.id)
        .all()
    )


def get_vault(db: Session, vault_id: int, caller_id: int) -> Vault:
    """
    Return the vault if the caller has any access to it.  No access looks
    exactly like a missing vault.
    """
    if permission_for(db, vault_id, caller_id) is Permission.NONE:
        raise NotFoundError("Vault not found")
    return db.query(Vault).filter(Vault.id == vault_id).first()
