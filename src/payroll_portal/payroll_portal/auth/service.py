from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import AuthErrorCode
from ..core.exceptions import AuthenticationError, StoreError, ValidationError
from ..documents.model import Unsubscribe
from ..status.board import StatusBoard
from .client import AuthClient
from .model import Principal, UserSession
from .repository import ProfileRepository

logger = logging.getLogger(__name__)

GENERIC_LOGIN_ERROR = "Login failed. Please check your email or password."
INVALID_CREDENTIAL_ERROR = "The email or password is incorrect."
MISSING_PROFILE_ERROR = "Your account has no payroll profile yet. Please contact an administrator."


def login_error_message(code: AuthErrorCode) -> str:
    if code == AuthErrorCode.INVALID_CREDENTIAL:
        return INVALID_CREDENTIAL_ERROR
    return GENERIC_LOGIN_ERROR


class SessionManager:
    """Resolves the signed-in principal to a role/team session.

    An authenticated principal without a usable profile never gets a session:
    the manager reports an error and signs it out.
    """

    def __init__(self, auth: AuthClient, profiles: ProfileRepository, status: StatusBoard):
        self._auth = auth
        self._profiles = profiles
        self._status = status
        self._unsubscribe: Optional[Unsubscribe] = None
        self._session: Optional[UserSession] = None

    @property
    def current(self) -> Optional[UserSession]:
        return self._session

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._auth.on_auth_state_changed(self._on_auth_state)

    def stop(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def _on_auth_state(self, principal: Optional[Principal]) -> None:
        if principal is None:
            self._session = None
            return

        try:
            profile = self._profiles.get(principal.uid)
        except (StoreError, ValidationError) as exc:
            logger.error("Profile lookup for uid=%s failed: %s", principal.uid, exc)
            profile = None

        if profile is None:
            logger.error("No usable profile for uid=%s; signing out", principal.uid)
            self._session = None
            self._status.error(MISSING_PROFILE_ERROR)
            self._auth.sign_out()
        else:
            self._session = UserSession(principal=principal, profile=profile)

    def login(self, email: str, password: str) -> bool:
        self._status.clear()
        try:
            self._auth.sign_in(email, password)
        except AuthenticationError as e:
            logger.info("Login failed: %s", e.code.value)
            self._status.error(login_error_message(e.code))
            return False
        return self._session is not None

    def logout(self) -> None:
        self._auth.sign_out()
