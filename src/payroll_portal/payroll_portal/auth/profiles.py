from __future__ import annotations

from typing import Optional

from ..core.constants import USERS_COLLECTION
from ..documents.store import DocumentStore
from .model import UserProfile
from .repository import ProfileRepository


class DocumentProfileRepository(ProfileRepository):
    """Profiles live in the ``users`` collection, document id = principal uid.

    Raises ``StoreError`` when the read fails and ``ValidationError`` when the
    stored profile is malformed.
    """

    def __init__(self, documents: DocumentStore):
        self._documents = documents

    def get(self, uid: str) -> Optional[UserProfile]:
        snapshot = self._documents.get(USERS_COLLECTION, uid)
        if not snapshot.exists:
            return None
        return UserProfile.from_dict(snapshot.data)

    def put(self, uid: str, profile: UserProfile) -> None:
        """Provisioning helper for seed scripts; the web app never writes profiles."""
        self._documents.set(USERS_COLLECTION, uid, profile.to_dict())
