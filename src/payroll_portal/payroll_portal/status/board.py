from __future__ import annotations

from typing import MutableMapping, Optional

from ..core.enums import Severity
from .model import StatusMessage


class StatusBoard:
    """Single-slot status message holder.

    Setting a message replaces the previous one; nothing is queued and nothing
    expires on its own. The slot lives in ``storage`` (the Flask session in the
    web app, a plain dict in tests) so it survives redirects until dismissed.
    """

    KEY = "status"

    def __init__(self, storage: MutableMapping):
        self._storage = storage

    @property
    def current(self) -> Optional[StatusMessage]:
        raw = self._storage.get(self.KEY)
        if not raw:
            return None
        return StatusMessage.from_dict(raw)

    def set(self, text: str, severity: Severity = Severity.INFO) -> StatusMessage:
        message = StatusMessage(text=text, severity=severity)
        self._storage[self.KEY] = message.to_dict()
        return message

    def success(self, text: str) -> StatusMessage:
        return self.set(text, Severity.SUCCESS)

    def error(self, text: str) -> StatusMessage:
        return self.set(text, Severity.ERROR)

    def info(self, text: str) -> StatusMessage:
        return self.set(text, Severity.INFO)

    def clear(self) -> None:
        self._storage.pop(self.KEY, None)
