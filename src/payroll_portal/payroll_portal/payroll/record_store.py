from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..core.constants import DEFAULT_APP_NAMESPACE, PAYROLL_COLLECTION
from ..core.exceptions import SaveError, StoreError, SubscriptionError, ValidationError
from ..documents.model import DocumentSnapshot, Unsubscribe
from ..documents.store import DocumentStore
from .model import PayrollDocument, document_key, new_record_id
from .ranking import TeamRanking

logger = logging.getLogger(__name__)


def _once(callback: Callable[[Exception], None]) -> Callable[[Exception], None]:
    fired = False

    def wrapper(exc: Exception) -> None:
        nonlocal fired
        if fired:
            return
        fired = True
        callback(exc)

    return wrapper


class PayrollRecordStore:
    """Reads and writes team-month payroll documents.

    Team-scoped: ``subscribe``/``save``/``load_period`` on one composite key.
    Admin-scoped: ``subscribe_all`` over every team for one year/month.
    """

    def __init__(
        self,
        documents: DocumentStore,
        *,
        namespace: str = DEFAULT_APP_NAMESPACE,
        ranking: Optional[TeamRanking] = None,
        id_factory: Callable[[], str] = new_record_id,
    ):
        self._documents = documents
        self._namespace = namespace
        self._ranking = ranking or TeamRanking()
        self._new_id = id_factory

    @property
    def ranking(self) -> TeamRanking:
        return self._ranking

    def document_id(self, team_id: str, year: int, month: int) -> str:
        return document_key(self._namespace, team_id, year, month)

    def subscribe(
        self,
        team_id: str,
        year: int,
        month: int,
        on_snapshot: Callable[[PayrollDocument], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        report = _once(on_error)

        def handle(snapshot: DocumentSnapshot) -> None:
            try:
                document = self._decode(snapshot, team_id, year, month)
            except ValidationError as exc:
                report(SubscriptionError(str(exc)))
                return
            on_snapshot(self._fill_missing_ids(document))

        return self._documents.watch(
            PAYROLL_COLLECTION,
            self.document_id(team_id, year, month),
            handle,
            lambda exc: report(SubscriptionError(str(exc))),
        )

    def save(self, document: PayrollDocument) -> None:
        doc_id = self.document_id(document.team_id, document.year, document.month)
        try:
            self._documents.set(PAYROLL_COLLECTION, doc_id, document.to_dict())
        except StoreError as exc:
            logger.error("Saving %s failed: %s", doc_id, exc)
            raise SaveError(str(exc)) from exc
        logger.info("Saved %s (%d rows)", doc_id, len(document.employees))

    def load_period(self, team_id: str, year: int, month: int) -> Optional[PayrollDocument]:
        """One-shot read; every row comes back with a fresh id."""
        doc_id = self.document_id(team_id, year, month)
        try:
            snapshot = self._documents.get(PAYROLL_COLLECTION, doc_id)
            if not snapshot.exists:
                return None
            document = PayrollDocument.from_dict(snapshot.data)
        except (StoreError, ValidationError) as exc:
            logger.error("Loading %s failed: %s", doc_id, exc)
            raise SubscriptionError(str(exc)) from exc
        return document.with_employees(e.with_id(self._new_id()) for e in document.employees)

    def subscribe_all(
        self,
        year: int,
        month: int,
        on_snapshot: Callable[[list[PayrollDocument]], None],
        on_error: Callable[[Exception], None],
    ) -> Unsubscribe:
        report = _once(on_error)

        def handle(snapshots: Sequence[DocumentSnapshot]) -> None:
            try:
                documents = [self._fill_missing_ids(PayrollDocument.from_dict(s.data)) for s in snapshots if s.exists]
            except ValidationError as exc:
                report(SubscriptionError(str(exc)))
                return
            on_snapshot(self._ranking.sort(documents))

        return self._documents.watch_query(
            PAYROLL_COLLECTION,
            {"year": int(year), "month": int(month)},
            handle,
            lambda exc: report(SubscriptionError(str(exc))),
        )

    @staticmethod
    def _decode(snapshot: DocumentSnapshot, team_id: str, year: int, month: int) -> PayrollDocument:
        if not snapshot.exists:
            return PayrollDocument.empty(team_id, year, month)
        return PayrollDocument.from_dict(snapshot.data)

    def _fill_missing_ids(self, document: PayrollDocument) -> PayrollDocument:
        if all(e.id for e in document.employees):
            return document
        return document.with_employees(e if e.id else e.with_id(self._new_id()) for e in document.employees)
