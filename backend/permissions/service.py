# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Permission grant manager – explicit (vault, user, level) rows.

Rules
-----
* Only callers at ADMIN or above on the vault may grant, change, revoke or
  list grants.
* A grant may only target an existing, active user who is not the vault's
  owner, and only once per (vault, user).  Changing a level goes through
  :func:`update_permission`.
* Nobody may change their own grant, whatever level they hold.
* The owner's access is implicit and can never be revoked.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import (
    DuplicateGrantError,
    NotFoundError,
    OwnerGrantProtectedError,
    SelfModificationError,
    TargetInactiveError,
    TargetNotFoundError,
)
from core.logger import get_logger
from models.user import User
from models.vault import Vault
from models.vault_permission import VaultUserPermission
from permissions.evaluator import Permission, permission_for, require_permission

log = get_logger("permissions")


def _load_grant(db: Session, grant_id: int) -> VaultUserPermission:
    grant = db.query(VaultUserPermission).filter(VaultUserPermission.id == grant_id).first()
    if grant is None:
        raise NotFoundError("Permission not found")
    return grant


def grant_permission(
    db: Session,
    vault_id: int,
    target_user_id: int,
    level: str,
    caller_id: int,
) -> VaultUserPermission:
    """Create a grant row stamped ``granted_by=caller_id``."""
    require_permission(db, vault_id, caller_id, Permission.ADMIN)

    target = db.query(User).filter(User.id == target_user_id).first()
    if target is None:
        raise TargetNotFoundError("Target user not found")
    if not target.is_active:
        raise TargetInactiveError("Cannot grant permissions to inactive user")

    vault = db.query(Vault).filter(Vault.id == vault_id).first()
    if vault.owner_id == target_user_id:
        raise OwnerGrantProtectedError("The vault owner already has full access")

    existing = (
        db.query(VaultUserPermission)
        .filter(
            VaultUserPermission.vault_id == vault_id,
            VaultUserPermission.user_id == target_user_id,
        )
        .first()
    )
    if existing is not None:
        raise DuplicateGrantError("User already has permissions for this vault")

    grant = VaultUserPermission(
        vault_id=vault_id,
        user_id=target_user_id,
        permission=level,
        granted_by=caller_id,
    )
    db.add(grant)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same (vault, user) first
        db.rollback()
        raise DuplicateGrantError("User already has permissions for this vault")
    db.refresh(grant)

    log.info(
        "Granted %s on vault %d to user %d (by user %d)",
        level, vault_id, target_user_id, caller_id,
    )
    return grant


def update_permission(
    db: Session,
    grant_id: int,
    level: str,
    caller_id: int,
) -> VaultUserPermission:
    """Change the level of an existing grant.  Only ``permission`` moves."""
    grant = _load_grant(db, grant_id)
    require_permission(db, grant.vault_id, caller_id, Permission.ADMIN)

    if grant.user_id == caller_id:
        raise SelfModificationError("Cannot modify your own permissions")

    previous = grant.permission
    grant.permission = level
    db.commit()
    db.refresh(grant)

    log.info(
        "Grant %d on vault %d changed %s -> %s (by user %d)",
        grant.id, grant.vault_id, previous, level, caller_id,
    )
    return grant


def revoke_permission(db: Session, grant_id: int, caller_id: int) -> None:
    """Delete a grant row."""
    grant = _load_grant(db, grant_id)
    require_permission(db, grant.vault_id, caller_id, Permission.ADMIN)

    vault = db.query(Vault).filter(Vault.id == grant.vault_id).first()
    if vault.owner_id == grant.user_id:
        raise OwnerGrantProtectedError("Cannot revoke owner permissions")

    vault_id, user_id = grant.vault_id, grant.user_id
    db.delete(grant)
    db.commit()

    log.info("Revoked access of user %d to vault %d (by user %d)", user_id, vault_id, caller_id)


def list_vault_permissions(db: Session, vault_id: int, caller_id: int) -> list[VaultUserPermission]:
    """All explicit grants on the vault.  The owner has none, so is absent."""
    require_permission(db, vault_id, caller_id, Permission.ADMIN)
    return (
        db.query(VaultUserPermission)
        .filter(VaultUserPermission.vault_id == vault_id)
        .order_by(VaultUserPermission.id)
        .all()
    )


def get_user_permission(db: Session, vault_id: int, caller_id: int) -> Permission:
    """The caller's own level on the vault (NONE when they have no access)."""
    return permission_for(db, vault_id, caller_id)


def list_user_vaults(db: Session, user_id: int) -> list[tuple[Vault, Permission]]:
    """
    Every vault *user_id* can reach, tagged with the level that reaches it.

    Owned vaults come first and are tagged OWNER.  A grant row on a vault the
    user also owns is ignored, so each vault appears exactly once.
    """
    owned = db.query(Vault).filter(Vault.owner_id == user_id).order_by(Vault.id).all()
    result = [(vault, Permission.OWNER) for vault in owned]

    granted = (
        db.query(Vault, VaultUserPermission.permission)
        .join(VaultUserPermission, VaultUserPermission.vault_id == Vault.id)
        .filter(VaultUserPermission.user_id == user_id, Vault.owner_id != user_id)
        .order_by(Vault.id)
        .all()
    )
    result.extend((vault, Permission.from_grant(level)) for vault, level in granted)
    return result
