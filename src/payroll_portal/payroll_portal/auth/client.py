from __future__ import annotations

import logging
from typing import Callable, MutableMapping, Optional

from werkzeug.security import check_password_hash

from ..core.enums import AuthErrorCode
from ..core.exceptions import AuthenticationError, StoreError
from ..documents.model import Unsubscribe
from .model import Principal
from .repository import AccountRepository

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[Principal]], None]


class AuthClient:
    """Email/password identity provider client for one browser session.

    The signed-in principal is kept in ``state`` (the Flask session in the web
    app). Listeners get the current principal when they register and again on
    every sign-in/sign-out.

    With ``enumeration_protection`` on, an unknown email and a wrong password
    both fail as ``invalid-credential``.
    """

    UID_KEY = "auth_uid"
    EMAIL_KEY = "auth_email"

    def __init__(
        self,
        accounts: AccountRepository,
        state: MutableMapping,
        *,
        enumeration_protection: bool = True,
    ):
        self._accounts = accounts
        self._state = state
        self._enumeration_protection = enumeration_protection
        self._listeners: list[AuthListener] = []

    @property
    def current_principal(self) -> Optional[Principal]:
        uid = self._state.get(self.UID_KEY)
        if not uid:
            return None
        return Principal(uid=str(uid), email=str(self._state.get(self.EMAIL_KEY, "")))

    def on_auth_state_changed(self, callback: AuthListener) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        callback(self.current_principal)
        return unsubscribe

    def sign_in(self, email: str, password: str) -> Principal:
        email = (email or "").strip().lower()
        try:
            account = self._accounts.get_by_email(email)
        except StoreError as exc:
            raise AuthenticationError("Identity provider unavailable", AuthErrorCode.OTHER) from exc

        if not account or not account.is_active:
            self._reject(email, AuthErrorCode.USER_NOT_FOUND)

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False
        if not ok:
            self._reject(email, AuthErrorCode.WRONG_PASSWORD)

        principal = Principal(uid=account.uid, email=account.email)
        self._state[self.UID_KEY] = principal.uid
        self._state[self.EMAIL_KEY] = principal.email
        logger.info("Signed in uid=%s", principal.uid)
        self._notify(principal)
        return principal

    def sign_out(self) -> None:
        had_principal = self._state.pop(self.UID_KEY, None) is not None
        self._state.pop(self.EMAIL_KEY, None)
        if had_principal:
            self._notify(None)

    def _reject(self, email: str, code: AuthErrorCode) -> None:
        logger.info("Sign-in rejected for %s (%s)", email, code.value)
        if self._enumeration_protection:
            code = AuthErrorCode.INVALID_CREDENTIAL
        raise AuthenticationError("Sign-in failed", code)

    def _notify(self, principal: Optional[Principal]) -> None:
        for listener in list(self._listeners):
            listener(principal)
