# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Access-control evaluator – the one place that knows the permission ladder.

    OWNER  >  ADMIN  >  WRITE  >  READ  >  NONE

OWNER comes from ``vaults.owner_id``; ADMIN / WRITE / READ come from the
single ``vault_user_permissions`` row for (vault, user).  Ownership is checked
first and wins over any row that might also exist for the owner.

Every vault-scoped service calls :func:`require_permission` before it reads
or writes anything.
"""

import enum

from sqlalchemy.orm import Session

from core.errors import InsufficientPermissionError, NotFoundError
from models.vault import Vault
from models.vault_permission import VaultUserPermission


class Permission(enum.IntEnum):
    NONE = 0
    READ = 1
    WRITE = 2
    ADMIN = 3
    OWNER = 4

    @classmethod
    def from_grant(cls, level: str) -> "Permission":
        """Map a stored grant value ('read' / 'write' / 'admin')."""
        return cls[level.upper()]

    @property
    def label(self) -> str | None:
        """API representation: 'owner', 'admin', ... or None for no access."""
        return None if self is Permission.NONE else self.name.lower()


def permission_for(db: Session, vault_id: int, user_id: int) -> Permission:
    """
    Resolve *user_id*'s effective level on *vault_id*.

    Raises :class:`NotFoundError` if the vault does not exist.
    """
    vault = db.query(Vault).filter(Vault.id == vault_id).first()
    if vault is None:
        raise NotFoundError("Vault not found")

    if vault.owner_id == user_id:
        return Permission.OWNER

    grant = (
        db.query(VaultUserPermission)
        .filter(
            VaultUserPermission.vault_id == vault_id,
            VaultUserPermission.user_id == user_id,
        )
        .first()
    )
    if grant is None:
        return Permission.NONE
    return Permission.from_grant(grant.permission)


def require_permission(
    db: Session,
    vault_id: int,
    user_id: int,
    required: Permission,
) -> Permission:
    """
    Assert that *user_id* holds at least *required* on *vault_id* and return
    the resolved level.
    """
    level = permission_for(db, vault_id, user_id)
    if level < required:
        raise InsufficientPermissionError(
            f"Insufficient permissions: {required.name.lower()} access to this vault is required"
        )
    return level
