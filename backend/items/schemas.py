# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the credential item endpoints."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ItemType = Literal["password", "credit_card", "secure_note", "software_license"]


# -- Requests --------------------------------------------------------------
# The client sends *plaintext* secrets; the server encrypts them before
# persisting.  The *_encrypted columns are never accepted from the client.
#
# Which optional fields matter depends on ``type``:
#   password          username, website_url, password
#   credit_card       card_number, card_holder_name, card_expiry_date, card_cvv
#   software_license  license_key, license_email
#   (any type)        notes


class CredentialItemCreate(BaseModel):
    title: str = Field(min_length=1)
    type: ItemType
    vault_id: int
    category_id: Optional[int] = None
    website_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    notes: Optional[str] = None
    card_number: Optional[str] = None
    card_holder_name: Optional[str] = None
    card_expiry_date: Optional[str] = None
    card_cvv: Optional[str] = None
    license_key: Optional[str] = None
    license_email: Optional[str] = None


class CredentialItemUpdate(BaseModel):
    """
    Partial update.  Fields left out of the JSON body are untouched; fields
    sent as ``null`` are cleared.  ``type`` and ``vault_id`` are fixed at
    creation.
    """

    title: Optional[str] = Field(None, min_length=1)
    category_id: Optional[int] = None
    website_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    notes: Optional[str] = None
    card_number: Optional[str] = None
    card_holder_name: Optional[str] = None
    card_expiry_date: Optional[str] = None
    card_cvv: Optional[str] = None
    license_key: Optional[str] = None
    license_email: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_null(cls, value):
        if value is None:
            raise ValueError("title may not be null")
        return value


class SearchItemsRequest(BaseModel):
    """
    ``category_id`` distinguishes "absent" (no filter) from an explicit
    ``null`` (only uncategorised items).
    """

    vault_id: Optional[int] = None
    category_id: Optional[int] = None
    type: Optional[ItemType] = None
    query: Optional[str] = None


# -- Responses -------------------------------------------------------------
# Plaintext in, plaintext out: sensitive fields are decrypted for the caller.
# Ciphertext only ever exists at rest.


class CredentialItemResponse(BaseModel):
    """
    An item as the caller sees it, secrets decrypted.

    An empty string is not a secret: ``password``, ``notes``, ``card_number``,
    ``card_cvv`` or ``license_key`` sent as ``""`` is stored as NULL and comes
    back as ``null``. Plain fields keep ``""`` as sent.
    """

    id: int
    title: str
    type: str
    vault_id: int
    category_id: Optional[int]
    website_url: Optional[str]
    username: Optional[str]
    password: Optional[str]
    notes: Optional[str]
    card_number: Optional[str]
    card_holder_name: Optional[str]
    card_expiry_date: Optional[str]
    card_cvv: Optional[str]
    license_key: Optional[str]
    license_email: Optional[str]
    created_by: int
    created_at: datetime
    updated_at: datetime


class CredentialItemListResponse(BaseModel):
    items: List[CredentialItemResponse]
