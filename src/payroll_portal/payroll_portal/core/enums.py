from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Authorization role stored in a user profile."""

    ADMIN = "admin"
    TEAM = "team"


class Severity(str, Enum):
    """Severity of the single status message shown to the user."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class AuthErrorCode(str, Enum):
    """Reasons reported by the identity provider when sign-in fails."""

    INVALID_CREDENTIAL = "invalid-credential"
    USER_NOT_FOUND = "user-not-found"
    WRONG_PASSWORD = "wrong-password"
    OTHER = "other"
