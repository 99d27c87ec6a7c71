"""
Tests for the database-backed session store.

Covers:
- A revoked token is invalid, any other token stays valid
- Revoking twice is harmless
- Expired revocations are purged on the next revoke
"""

from datetime import datetime, timedelta, timezone

from core.sessions import DatabaseSessionStore
from models.revoked_token import RevokedToken


def test_revoke_and_check(db):
    store = DatabaseSessionStore(db)
    later = datetime.now(timezone.utc) + timedelta(hours=1)

    store.revoke("token-a", later)

    assert store.is_valid("token-a") is False
    assert store.is_valid("token-b") is True


def test_revoke_is_idempotent(db):
    store = DatabaseSessionStore(db)
    later = datetime.now(timezone.utc) + timedelta(hours=1)

    store.revoke("token-a", later)
    store.revoke("token-a", later)

    assert db.query(RevokedToken).count() == 1


def test_raw_token_never_stored(db):
    DatabaseSessionStore(db).revoke("token-a", datetime.now(timezone.utc) + timedelta(hours=1))
    row = db.query(RevokedToken).one()
    assert row.token_hash != "token-a"
    assert len(row.token_hash) == 64


def test_expired_rows_purged(db):
    store = DatabaseSessionStore(db)
    store.revoke("old-token", datetime.now(timezone.utc) - timedelta(hours=1))
    store.revoke("new-token", datetime.now(timezone.utc) + timedelta(hours=1))

    assert db.query(RevokedToken).count() == 1
    assert store.is_valid("new-token") is False
