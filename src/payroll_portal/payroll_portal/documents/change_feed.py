from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.exceptions import StoreError
from .model import Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Listener:
    collection: str
    doc_id: Optional[str]
    fetch: Callable[[], Any]
    on_snapshot: Callable[[Any], None]
    on_error: Callable[[Exception], None]


class ChangeFeed:
    """In-process change notification for a document store.

    Stores call ``publish`` after each write. Every listener on the written
    document (or on a query over its collection) re-reads through its
    ``fetch`` callable and gets the fresh result. A fetch that raises
    ``StoreError`` is reported to that listener once and the listener is
    dropped; there is no retry.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._listeners: dict[int, _Listener] = {}

    def listen(
        self,
        collection: str,
        doc_id: Optional[str],
        fetch: Callable[[], Any],
        on_snapshot: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        """Register a listener and deliver the current state to it.

        ``doc_id=None`` means a query listener: any write in ``collection``
        triggers a re-fetch.
        """
        listener = _Listener(collection, doc_id, fetch, on_snapshot, on_error)
        with self._lock:
            key = next(self._ids)
            self._listeners[key] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(key, None)

        self._deliver(key, listener)
        return unsubscribe

    def publish(self, collection: str, doc_id: str) -> None:
        with self._lock:
            targets = [
                (key, listener)
                for key, listener in self._listeners.items()
                if listener.collection == collection and listener.doc_id in (None, doc_id)
            ]
        for key, listener in targets:
            self._deliver(key, listener)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def _deliver(self, key: int, listener: _Listener) -> None:
        try:
            result = listener.fetch()
        except StoreError as exc:
            with self._lock:
                still_listening = self._listeners.pop(key, None) is not None
            if still_listening:
                logger.warning("Listener on %s/%s failed: %s", listener.collection, listener.doc_id or "*", exc)
                listener.on_error(exc)
            return

        with self._lock:
            if key not in self._listeners:
                return
        listener.on_snapshot(result)
