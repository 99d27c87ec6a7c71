# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""VaultUserPermission ORM model – explicit per-user vault grants."""

from sqlalchemy import Column, Integer, Enum, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from database import Base

GRANT_LEVELS = ("read", "write", "admin")


class VaultUserPermission(Base):
    __tablename__ = "vault_user_permissions"
    # One row per (vault, user).  The constraint, not the service-level
    # pre-check, is what settles two concurrent grants for the same pair.
    __table_args__ = (
        UniqueConstraint("vault_id", "user_id", name="uq_vault_user_permission"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    vault_id = Column(Integer, ForeignKey("vaults.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    permission = Column(Enum(*GRANT_LEVELS, name="vault_permission"), nullable=False)
    granted_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
