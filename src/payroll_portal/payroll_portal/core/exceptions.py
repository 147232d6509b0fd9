from __future__ import annotations

from .enums import AuthErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are rejected."""

    def __init__(self, message: str, code: AuthErrorCode = AuthErrorCode.OTHER):
        super().__init__(message)
        self.code = code


class AuthorizationError(DomainError):
    """Raised when a principal has no usable profile or lacks the role for an action."""


class StoreError(DomainError):
    """Raised when the document store cannot complete a read or write."""


class SubscriptionError(DomainError):
    """Raised when a payroll read path (live or one-shot) is broken."""


class SaveError(DomainError):
    """Raised when a payroll document cannot be written."""


class ExportPreconditionError(DomainError):
    """Raised when an export is requested without a ready exporter or without data."""
