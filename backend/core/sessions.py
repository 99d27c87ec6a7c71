# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Session store – the record of bearer tokens that were explicitly logged out.

JWTs are stateless, so "logout" needs somewhere to remember the tokens that
must no longer be honoured until they expire on their own.  That state lives
in the ``revoked_tokens`` table rather than in process memory, so every
worker process sharing the database sees the same revocations.

Only a SHA-256 digest of the token is stored.
"""

import hashlib
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy.orm import Session

from core.logger import get_logger

log = get_logger("sessions")


class SessionStore(Protocol):
    def revoke(self, token: str, expires_at: datetime) -> None: ...

    def is_valid(self, token: str) -> bool: ...


def _digest(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class DatabaseSessionStore:
    """:class:`SessionStore` backed by the relational store."""

    def __init__(self, db: Session):
        self.db = db

    def revoke(self, token: str, expires_at: datetime) -> None:
        from models.revoked_token import RevokedToken  # noqa: E402

        digest = _digest(token)
        # Rows past their expiry are useless: the JWT check rejects them anyway
        self.db.query(RevokedToken).filter(
            RevokedToken.expires_at < datetime.now(timezone.utc)
        ).delete(synchronize_session=False)

        if not self.db.query(RevokedToken).filter(RevokedToken.token_hash == digest).first():
            self.db.add(RevokedToken(token_hash=digest, expires_at=expires_at))
        self.db.commit()
        log.info("Session revoked (expires %s)", expires_at.isoformat())

    def is_valid(self, token: str) -> bool:
        from models.revoked_token import RevokedToken  # noqa: E402

        revoked = (
            self.db.query(RevokedToken.id)
            .filter(RevokedToken.token_hash == _digest(token))
            .first()
        )
        return revoked is None
