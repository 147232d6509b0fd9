from __future__ import annotations

from typing import Optional, Protocol

from .model import Account, UserProfile


class AccountRepository(Protocol):
    """Credential lookup used by the identity provider client.

    Note (DIP): the auth client depends on this interface, not on a concrete DB.
    """

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(self, *, uid: str, email: str, password_hash: str) -> None:
        raise NotImplementedError


class ProfileRepository(Protocol):
    """Role/team profiles keyed by principal uid. Read-only to the app."""

    def get(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError
