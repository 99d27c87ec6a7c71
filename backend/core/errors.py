# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Error taxonomy for the service layer.

Services raise these; they never build HTTP responses themselves.  The
single exception handler in ``main.py`` turns them into JSON bodies of the
form ``{"detail": "...", "error": "<kind>"}`` using ``status_code``.
"""


class VaultShareError(Exception):
    """Base class for every failure the core reports to the API boundary."""

    status_code = 400
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


# -- 404 -------------------------------------------------------------------


class NotFoundError(VaultShareError):
    """A referenced vault, category, item, grant or user does not exist."""

    status_code = 404
    kind = "not_found"


class TargetNotFoundError(NotFoundError):
    """The user a grant is addressed to does not exist."""


class VaultNotFoundOrForbiddenError(NotFoundError):
    """Vault deletion refused.  Deliberately does not say which of the two."""


# -- 403 -------------------------------------------------------------------


class InsufficientPermissionError(VaultShareError):
    status_code = 403
    kind = "insufficient_permission"


# -- 409 -------------------------------------------------------------------


class InvalidStateError(VaultShareError):
    """The request is well-formed but conflicts with the current data."""

    status_code = 409
    kind = "invalid_state"


class TargetInactiveError(InvalidStateError):
    pass


class DuplicateGrantError(InvalidStateError):
    pass


class SelfModificationError(InvalidStateError):
    pass


class OwnerGrantProtectedError(InvalidStateError):
    pass


# -- 400 -------------------------------------------------------------------


class InvalidInputError(VaultShareError):
    """Business-rule validation that the request schema cannot express."""

    status_code = 400
    kind = "invalid_input"


# -- 500 -------------------------------------------------------------------


class DataIntegrityError(VaultShareError):
    """
    Stored ciphertext could not be decrypted (corrupt value or wrong key).
    Fatal: never retried, never papered over with a placeholder.
    """

    status_code = 500
    kind = "integrity_error"
