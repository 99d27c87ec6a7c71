# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Account operations behind the /auth routes.

Credential failures stay ``HTTPException(401)`` so they look exactly like a
bad bearer token; everything else a caller can fix is ``InvalidInputError``.
"""

import re
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from core.errors import InvalidInputError
from core.logger import get_logger
from core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    token_expiry,
    verify_password,
)
from core.sessions import DatabaseSessionStore
from models.user import User

log = get_logger("auth")

# Same text for unknown email and wrong password
_LOGIN_FAIL = "Invalid email or password"

# (pattern, message) – checked in order, first miss wins
_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one digit"),
)
_MIN_PASSWORD_LENGTH = 8


def validate_new_password(pw: str) -> None:
    """Raise :class:`InvalidInputError` unless *pw* meets the login password policy."""
    if len(pw) < _MIN_PASSWORD_LENGTH:
        raise InvalidInputError(f"Password must be at least {_MIN_PASSWORD_LENGTH} characters")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(pw):
            raise InvalidInputError(message)


def set_password(user: User, new_password: str) -> None:
    """Store a fresh hash and salt on *user* (caller commits)."""
    user.password_hash, user.salt = hash_password(new_password)


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the active user owning these credentials and stamp ``last_login``."""
    user = db.query(User).filter(User.email == email).first()

    if not user or not verify_password(password, user.password_hash):
        log.warning("Failed login for %s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_LOGIN_FAIL)

    if not user.is_active:
        log.warning("Login refused for disabled user %d", user.id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account disabled")

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    log.info("User %d logged in", user.id)
    return user


def issue_token(user: User) -> tuple[str, datetime]:
    """Sign an access token for *user*; returns ``(token, expires_at)``."""
    token = create_access_token({"sub": user.email, "user_id": user.id, "role": user.role})
    return token, token_expiry(decode_access_token(token))


def logout(db: Session, token: str) -> None:
    """Revoke *token* until the moment it would have expired anyway."""
    DatabaseSessionStore(db).revoke(token, token_expiry(decode_access_token(token)))


def change_password(db: Session, user: User, old_password: str, new_password: str) -> None:
    """
    Self-service password change.  The old password must verify, so a stolen
    token alone is not enough.  Clears ``force_password_change``.
    """
    if not verify_password(old_password, user.password_hash):
        raise InvalidInputError("Old password is incorrect")
    validate_new_password(new_password)

    set_password(user, new_password)
    user.force_password_change = False
    db.commit()

    log.info("User %d changed their password", user.id)
