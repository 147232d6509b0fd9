from __future__ import annotations

import json
import re
from datetime import date, datetime
from typing import Any, Callable, Mapping, Sequence

from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .change_feed import ChangeFeed
from .model import DocumentSnapshot, Unsubscribe
from .store import DocumentStore

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _load(collection: str, doc_id: str, raw: Any) -> dict:
    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        data = json.loads(raw) if isinstance(raw, str) else dict(raw)
    except (TypeError, ValueError) as exc:
        raise StoreError(f"Document {collection}/{doc_id} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StoreError(f"Document {collection}/{doc_id} is not a JSON object")
    return data


class MySQLDocumentStore(DocumentStore):
    """JSON documents in the ``documents`` table, one row per (collection, doc_id)."""

    def __init__(self, conn_factory: DatabaseConnection, feed: ChangeFeed):
        self._conn_factory = conn_factory
        self._feed = feed

    def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT data FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
            if not row:
                return DocumentSnapshot(collection, doc_id)
            return DocumentSnapshot(collection, doc_id, _load(collection, doc_id, row["data"]))

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        try:
            payload = json.dumps(dict(data), default=_json_default, ensure_ascii=False)
        except TypeError as exc:
            raise StoreError(f"Document {collection}/{doc_id} is not serializable: {exc}") from exc

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO documents(collection, doc_id, data)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE data=VALUES(data)
                """,
                (collection, doc_id, payload),
            )
        self._feed.publish(collection, doc_id)

    def query(self, collection: str, filters: Mapping[str, Any]) -> Sequence[DocumentSnapshot]:
        clauses = ["collection=%s"]
        params: list[Any] = [collection]
        for name, value in filters.items():
            if not _FIELD_RE.match(name):
                raise StoreError(f"Invalid filter field: {name!r}")
            # ->> yields unquoted text, so compare against the text form.
            clauses.append(f"data->>'$.{name}' = %s")
            params.append(str(value))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT doc_id, data FROM documents WHERE {' AND '.join(clauses)} ORDER BY doc_id",
                tuple(params),
            )
            return [
                DocumentSnapshot(collection, r["doc_id"], _load(collection, r["doc_id"], r["data"]))
                for r in fetchall(cur)
            ]

    def watch(
        self,
        collection: str,
        doc_id: str,
        on_snapshot: Callable[[DocumentSnapshot], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        return self._feed.listen(collection, doc_id, lambda: self.get(collection, doc_id), on_snapshot, on_error)

    def watch_query(
        self,
        collection: str,
        filters: Mapping[str, Any],
        on_snapshot: Callable[[Sequence[DocumentSnapshot]], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        filters = dict(filters)
        return self._feed.listen(collection, None, lambda: self.query(collection, filters), on_snapshot, on_error)
