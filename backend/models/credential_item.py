# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""CredentialItem ORM model."""

from sqlalchemy import Column, Integer, String, Text, Enum, DateTime, ForeignKey
from sqlalchemy.sql import func

from database import Base

ITEM_TYPES = ("password", "credit_card", "secure_note", "software_license")


class CredentialItem(Base):
    __tablename__ = "credential_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    type = Column(Enum(*ITEM_TYPES, name="item_type"), nullable=False)
    vault_id = Column(Integer, ForeignKey("vaults.id"), nullable=False, index=True)
    # Cleared (not cascaded) when the category is deleted.
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    # -- Stored in clear ----------------------------------------------------
    website_url = Column(String(2048), nullable=True)
    username = Column(String(255), nullable=True)
    card_holder_name = Column(String(255), nullable=True)
    card_expiry_date = Column(String(16), nullable=True)  # MM/YY
    license_email = Column(String(255), nullable=True)

    # -- Cipher fields ------------------------------------------------------
    # Each holds  iv_hex ":" ciphertext_hex  with its own IV.  Never plaintext.
    password_encrypted = Column(Text, nullable=True)
    notes_encrypted = Column(Text, nullable=True)
    card_number_encrypted = Column(Text, nullable=True)
    card_cvv_encrypted = Column(Text, nullable=True)
    license_key_encrypted = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
