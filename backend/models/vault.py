# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Vault ORM model."""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base


class Vault(Base):
    __tablename__ = "vaults"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Ownership is the vault's root grant: the owner never has a row in
    # vault_user_permissions.  No ON DELETE – users are only deactivated.
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Advisory flag for the UI; it grants nobody anything.
    is_shared = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
