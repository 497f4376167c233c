"""
Error kinds surfaced by the Member Service.

Every failure a client can observe maps to one member of ``ErrorKind``.
Clients receive the kind and a message from a fixed set, never raw store or
exception text.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def default_message(self) -> str:
        return _DEFAULT_MESSAGES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}

_DEFAULT_MESSAGES = {
    ErrorKind.VALIDATION: "Invalid account details",
    ErrorKind.CONFLICT: "Account already exists",
    ErrorKind.UNAUTHORIZED: "Please log in",
    ErrorKind.FORBIDDEN: "Not allowed to modify this account",
    ErrorKind.NOT_FOUND: "Account not found",
    ErrorKind.INTERNAL: "Internal server error",
}

# Field-level messages that may be shown to clients
USERNAME_REQUIRED = "Username is required"
EMAIL_REQUIRED = "Email is required"
PASSWORD_REQUIRED = "Password is required"
INVALID_EMAIL = "Invalid email address"
USERNAME_TAKEN = "Username already exists"
EMAIL_TAKEN = "Email already exists"
CREDENTIALS_MISMATCH = "Credentials do not match"

SAFE_MESSAGES = frozenset({
    USERNAME_REQUIRED,
    EMAIL_REQUIRED,
    PASSWORD_REQUIRED,
    INVALID_EMAIL,
    USERNAME_TAKEN,
    EMAIL_TAKEN,
    CREDENTIALS_MISMATCH,
    *_DEFAULT_MESSAGES.values(),
})


class AccountError(Exception):
    """Raised by account operations; rendered by the app's exception handler."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        if message not in SAFE_MESSAGES:
            message = kind.default_message
        self.kind = kind
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict:
        return {
            "success": False,
            "response": {"error": self.kind.value, "message": self.message},
        }
