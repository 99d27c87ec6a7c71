# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Category manager.  Categories are plain labels, nothing here is encrypted.

Reads need READ on the owning vault, mutations need WRITE.  Deleting a
category never deletes items: their ``category_id`` is cleared first, in the
same transaction as the delete.
"""

from sqlalchemy.orm import Session

from core.errors import NotFoundError
from core.logger import get_logger
from models.category import Category
from models.credential_item import CredentialItem
from permissions.evaluator import Permission, require_permission

log = get_logger("categories")

_UPDATABLE = ("name", "description", "color")


def _load_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if category is None:
        raise NotFoundError("Category not found")
    return category


def create_category(
    db: Session,
    name: str,
    description: str | None,
    color: str | None,
    vault_id: int,
    caller_id: int,
) -> Category:
    require_permission(db, vault_id, caller_id, Permission.WRITE)

    category = Category(name=name, description=description, color=color, vault_id=vault_id)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, changes: dict, caller_id: int) -> Category:
    """Partial update; keys absent from *changes* are left alone."""
    category = _load_category(db, category_id)
    require_permission(db, category.vault_id, caller_id, Permission.WRITE)

    for field in _UPDATABLE:
        if field in changes:
            setattr(category, field, changes[field])
    db.commit()
    db.refresh(category)
    return category


def get_category(db: Session, category_id: int, caller_id: int) -> Category:
    category = _load_category(db, category_id)
    require_permission(db, category.vault_id, caller_id, Permission.READ)
    return category


def list_vault_categories(db: Session, vault_id: int, caller_id: int) -> list[Category]:
    """Categories of a vault, alphabetical."""
    require_permission(db, vault_id, caller_id, Permission.READ)
    return (
        db.query(Category)
        .filter(Category.vault_id == vault_id)
        .order_by(Category.name.asc(), Category.id.asc())
        .all()
    )


def delete_category(db: Session, category_id: int, caller_id: int) -> None:
    """Orphan the category's items, then delete it – one commit."""
    category = _load_category(db, category_id)
    require_permission(db, category.vault_id, caller_id, Permission.WRITE)

    try:
        orphaned = (
            db.query(CredentialItem)
            .filter(CredentialItem.category_id == category_id)
            .update({CredentialItem.category_id: None}, synchronize_session=False)
        )
        db.delete(category)
        db.commit()
    except Exception:
        db.rollback()
        raise

    log.info(
        "Category %d deleted by user %d (%d item(s) uncategorised)",
        category_id, caller_id, orphaned,
    )
