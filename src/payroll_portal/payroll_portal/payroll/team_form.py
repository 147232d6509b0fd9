from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import SaveError, SubscriptionError, ValidationError
from ..documents.model import Unsubscribe
from ..status.board import StatusBoard
from .model import EmployeeRecord, PayrollDocument, Period, new_record_id
from .record_store import PayrollRecordStore

logger = logging.getLogger(__name__)


class TeamEntryForm:
    """Editable roster of one team's payroll rows for one period.

    Rows are local until ``save``. While mounted, every emission from the
    record store replaces the local rows wholesale; if the form held unsaved
    edits that differ from the incoming rows, an info status says so.
    """

    def __init__(
        self,
        records: PayrollRecordStore,
        status: StatusBoard,
        *,
        team_id: str,
        period: Period,
        id_factory: Callable[[], str] = new_record_id,
        clock=now_local,
    ):
        self._records = records
        self._status = status
        self._team_id = team_id
        self._period = period
        self._new_id = id_factory
        self._clock = clock

        self._employees: list[EmployeeRecord] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self.loading = True
        self.dirty = False
        self.updated_at = None

    @property
    def team_id(self) -> str:
        return self._team_id

    @property
    def period(self) -> Period:
        return self._period

    @property
    def employees(self) -> tuple[EmployeeRecord, ...]:
        return tuple(self._employees)

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    # --- subscription lifecycle -------------------------------------------

    def mount(self) -> None:
        if self._unsubscribe is not None:
            return
        self.loading = True
        key = (self._team_id, self._period)
        self._unsubscribe = self._records.subscribe(
            self._team_id,
            self._period.year,
            self._period.month,
            lambda doc: self._on_snapshot(key, doc),
            lambda exc: self._on_error(key, exc),
        )

    def unmount(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def change_period(self, period: Period) -> None:
        if period == self._period:
            return
        was_mounted = self.mounted
        self.unmount()
        self._period = period
        self._employees = []
        self.dirty = False
        self.updated_at = None
        if was_mounted:
            self.mount()

    def _on_snapshot(self, key, document: PayrollDocument) -> None:
        if key != (self._team_id, self._period):
            logger.debug("Dropping snapshot for %s, form moved to %s", key, self._period)
            return
        incoming = list(document.employees)
        if self.dirty and incoming != self._employees:
            self._status.info("This month's data was updated elsewhere; your unsaved edits were replaced.")
        self._employees = incoming
        self.updated_at = document.updated_at
        self.dirty = False
        self.loading = False

    def _on_error(self, key, exc: Exception) -> None:
        if key != (self._team_id, self._period):
            return
        logger.error("Team %s subscription failed: %s", self._team_id, exc)
        self._status.error(f"[Team {self._team_id}] Could not load payroll data. Check your access rights.")
        self.loading = False

    # --- local edits --------------------------------------------------------

    def add_row(self) -> EmployeeRecord:
        record = EmployeeRecord.blank(self._new_id())
        self._employees.append(record)
        self.dirty = True
        return record

    def edit_field(self, record_id: str, field: str, value: str) -> EmployeeRecord:
        for index, record in enumerate(self._employees):
            if record.id == record_id:
                updated = record.with_field(field, value)
                self._employees[index] = updated
                self.dirty = True
                return updated
        raise ValidationError(f"No row with id {record_id}")

    def remove_row(self, record_id: str) -> None:
        remaining = [r for r in self._employees if r.id != record_id]
        if len(remaining) == len(self._employees):
            raise ValidationError(f"No row with id {record_id}")
        self._employees = remaining
        self.dirty = True

    def load_draft(self, rows: Iterable[EmployeeRecord]) -> None:
        """Restore rows the user is still editing (e.g. posted back by the browser)."""
        draft = [r if r.id else r.with_id(self._new_id()) for r in rows]
        if draft != self._employees:
            self._employees = draft
            self.dirty = True

    # --- backend operations ---------------------------------------------------

    def copy_prior_period(self) -> bool:
        key = (self._team_id, self._period)
        prior = self._period.previous()
        try:
            document = self._records.load_period(self._team_id, prior.year, prior.month)
        except SubscriptionError:
            self._status.error(f"Could not load {prior.label} data.")
            return False

        if key != (self._team_id, self._period):
            logger.info("Discarding %s copy, form moved to %s", prior.label, self._period)
            return False

        if document is None or not document.employees:
            self._status.info(f"No data found for {prior.label}.")
            return False

        self._employees = list(document.employees)
        self.dirty = True
        self._status.success(
            f"Copied {len(document.employees)} rows from {prior.label}. Save to keep them."
        )
        return True

    def save(self) -> bool:
        document = PayrollDocument(
            team_id=self._team_id,
            year=self._period.year,
            month=self._period.month,
            employees=tuple(self._employees),
            updated_at=self._clock(),
        )
        try:
            self._records.save(document)
        except SaveError:
            self._status.error("Saving failed. Check your access rights.")
            return False

        self.dirty = False
        self.updated_at = document.updated_at
        self._status.success(
            f"[Team {self._team_id}] {self._period.year}-{self._period.month:02d} data saved."
        )
        return True
