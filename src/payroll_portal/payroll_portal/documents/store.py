from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol, Sequence

from .model import DocumentSnapshot, Unsubscribe


class DocumentStore(Protocol):
    """Key-value document access keyed by ``(collection, doc_id)``.

    Writes replace the whole document. Both point reads and equality queries
    can be watched: the callback receives the current state right away and a
    fresh snapshot after every change. A failing read is delivered once to
    ``on_error`` and ends the watch.
    """

    def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        raise NotImplementedError

    def query(self, collection: str, filters: Mapping[str, Any]) -> Sequence[DocumentSnapshot]:
        raise NotImplementedError

    def watch(
        self,
        collection: str,
        doc_id: str,
        on_snapshot: Callable[[DocumentSnapshot], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        raise NotImplementedError

    def watch_query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        on_snapshot: Callable[[Sequence[DocumentSnapshot]], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        raise NotImplementedError
