# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives and auth guards live
here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256)
2. Credential-field encryption / decryption (AES-256-CBC, per-value IV)
3. JWT creation / decoding                  (PyJWT / HS256)
4. FastAPI dependency guards                (get_current_user, require_admin)
"""

import base64
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt as _jwt        # PyJWT
from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from core.config import settings
from core.errors import DataIntegrityError
from core.sessions import DatabaseSessionStore
from database import get_db

# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password hashing
# ---------------------------------------------------------------------------
# Round count comes from PASSWORD_HASH_ROUNDS (600 000 by default).
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> tuple[str, str]:
    """
    Hash a plaintext password with PBKDF2-SHA256.

    Returns
    -------
    password_hash : str   Full passlib hash string  e.g. "$pbkdf2-sha256$..."
    salt          : str   The salt as stored in the hash (adapted base64),
                          kept in its own column for the users schema.
    """
    password_hash = _pbkdf2.using(rounds=settings.password_hash_rounds).hash(plain)
    # "$pbkdf2-sha256$<rounds>$<salt>$<checksum>"
    salt = password_hash.split("$")[3]
    return password_hash, salt


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of a plaintext password against a
    pbkdf2_sha256 hash produced by :func:`hash_password`.
    """
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except ValueError:
        # Not a pbkdf2_sha256 hash at all
        return False


# ---------------------------------------------------------------------------
# 2.  AES-256-CBC – credential field encryption
# ---------------------------------------------------------------------------
# Stored form:   iv_hex ":" ciphertext_hex
# The IV travels with the value, so every cipher field decrypts on its own.
# A single deployment-wide key protects every vault.
# ---------------------------------------------------------------------------

_IV_BYTES = 16          # AES block size
_BLOCK_BITS = 128


def _get_master_key() -> bytes:
    """
    Decode the base64-encoded MASTER_ENCRYPTION_KEY from the environment.
    Called at use-time (not import-time) so the key is never cached at module
    load.  Must be exactly 32 bytes after decoding.
    """
    key = base64.b64decode(settings.master_encryption_key)
    if len(key) != 32:
        raise RuntimeError("MASTER_ENCRYPTION_KEY must decode to exactly 32 bytes")
    return key


def encrypt_value(plaintext: str) -> str:
    """
    Encrypt *plaintext* with AES-256-CBC and PKCS7 padding.

    A fresh random 16-byte IV is generated on every call, so encrypting the
    same string twice never yields the same stored value.
    """
    key = _get_master_key()
    iv = secrets.token_bytes(_IV_BYTES)

    padder = padding.PKCS7(_BLOCK_BITS).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return f"{iv.hex()}:{ciphertext.hex()}"


def decrypt_value(stored: str) -> str:
    """
    Decrypt a value produced by :func:`encrypt_value`.

    Raises :class:`DataIntegrityError` if the value is malformed, the padding
    is wrong (bad key or tampered data) or the result is not UTF-8.
    """
    key = _get_master_key()
    try:
        iv_hex, ct_hex = stored.split(":")
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(ct_hex)
        if len(iv) != _IV_BYTES or not ciphertext or len(ciphertext) % _IV_BYTES:
            raise ValueError("bad IV or ciphertext length")

        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
        plaintext_bytes = unpadder.update(padded) + unpadder.finalize()
        return plaintext_bytes.decode("utf-8")
    except (ValueError, AttributeError) as exc:
        # UnicodeDecodeError is a ValueError subclass
        raise DataIntegrityError("Stored credential could not be decrypted") from exc


# ---------------------------------------------------------------------------
# 3.  JWT – access tokens
# ---------------------------------------------------------------------------


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a JWT with HS256.

    *data* should contain at minimum: sub (email), user_id, role.
    ``exp`` and a random ``jti`` are added automatically; the jti keeps two
    tokens issued in the same second distinct for revocation.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode["exp"] = expire
    to_encode["jti"] = secrets.token_hex(16)
    return _jwt.encode(to_encode, settings.secret_key, algorithm="HS256")


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT.  Raises HTTP 401 on any failure (expired,
    bad signature, malformed).
    """
    try:
        return _jwt.decode(token, settings.secret_key, algorithms=["HS256"])
    except (_jwt.ExpiredSignatureError, _jwt.InvalidTokenError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def token_expiry(payload: dict) -> datetime:
    """The ``exp`` claim of a decoded token as an aware datetime."""
    return datetime.fromtimestamp(payload["exp"], tz=timezone.utc)


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guards
# ---------------------------------------------------------------------------

# The tokenUrl here is only used by the auto-generated OpenAPI docs;
# the actual login endpoint is POST /auth/login.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db=Depends(get_db),
):
    """
    Dependency: decode the JWT, reject it if it was logged out, load the User
    row, verify the account is active.  Returns the User ORM instance.

    Raises 401 if the token is invalid/revoked or the user is gone/disabled.
    """
    payload = decode_access_token(token)

    if not DatabaseSessionStore(db).is_valid(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session has been revoked",
        )

    # Lazy import to avoid circular dependency at module load time
    from models.user import User  # noqa: E402

    user = db.query(User).filter(User.id == payload.get("user_id")).first()
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


def require_admin(current_user=Depends(get_current_user)):
    """
    Dependency: wraps :func:`get_current_user` and additionally asserts the
    system role ``admin``.  Raises 403 otherwise.

    This is the account-level role; it grants nothing inside vaults.
    """
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


# -- IP Address extraction ----------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
