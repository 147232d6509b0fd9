from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.exceptions import ExportPreconditionError
from ..documents.model import Unsubscribe
from ..export.exporter import ExportFile, SpreadsheetExporter
from ..status.board import StatusBoard
from .model import EmployeeRecord, PayrollDocument, Period
from .pay import ZERO, as_number, net_pay, parse_amount
from .record_store import PayrollRecordStore

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = (
    "No.",
    "Team",
    "Name",
    "Resident ID",
    "Contact",
    "Bank",
    "Account Number",
    "Gross Pay",
    "Tax",
    "Net Pay",
    "Remarks",
)

EXPORT_COLUMN_WIDTHS = {
    "No.": 6,
    "Team": 8,
    "Name": 12,
    "Resident ID": 16,
    "Contact": 15,
    "Bank": 12,
    "Account Number": 20,
    "Gross Pay": 12,
    "Tax": 10,
    "Net Pay": 12,
    "Remarks": 40,
}


@dataclass(frozen=True)
class ReviewRow:
    index: int
    record: EmployeeRecord
    gross: Decimal
    tax: Decimal
    net: Decimal


@dataclass(frozen=True)
class TeamSection:
    team_id: str
    updated_at: object
    rows: tuple[ReviewRow, ...]
    gross_total: Decimal
    tax_total: Decimal
    net_total: Decimal


class AdminAggregationView:
    """Read-only view over every team's document for one period."""

    def __init__(
        self,
        records: PayrollRecordStore,
        status: StatusBoard,
        exporter: SpreadsheetExporter,
        *,
        period: Period,
    ):
        self._records = records
        self._status = status
        self._exporter = exporter
        self._period = period

        self._documents: list[PayrollDocument] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self.loading = True

    @property
    def period(self) -> Period:
        return self._period

    @property
    def documents(self) -> tuple[PayrollDocument, ...]:
        return tuple(self._documents)

    def mount(self) -> None:
        if self._unsubscribe is not None:
            return
        self.loading = True
        period = self._period
        self._unsubscribe = self._records.subscribe_all(
            period.year,
            period.month,
            lambda docs: self._on_snapshot(period, docs),
            lambda exc: self._on_error(period, exc),
        )

    def unmount(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def change_period(self, period: Period) -> None:
        if period == self._period:
            return
        was_mounted = self._unsubscribe is not None
        self.unmount()
        self._period = period
        self._documents = []
        if was_mounted:
            self.mount()

    def _on_snapshot(self, period: Period, documents: list[PayrollDocument]) -> None:
        if period != self._period:
            return
        self._documents = list(documents)
        self.loading = False

    def _on_error(self, period: Period, exc: Exception) -> None:
        if period != self._period:
            return
        logger.error("Admin subscription for %s failed: %s", period.label, exc)
        self._status.error("Could not load all teams' data. Check your access rights.")
        self.loading = False

    def sections(self) -> list[TeamSection]:
        sections = []
        for document in self._documents:
            rows = []
            for index, record in enumerate(document.employees, start=1):
                rows.append(
                    ReviewRow(
                        index=index,
                        record=record,
                        gross=parse_amount(record.gross_pay),
                        tax=parse_amount(record.tax),
                        net=net_pay(record),
                    )
                )
            sections.append(
                TeamSection(
                    team_id=document.team_id,
                    updated_at=document.updated_at,
                    rows=tuple(rows),
                    gross_total=sum((r.gross for r in rows), ZERO),
                    tax_total=sum((r.tax for r in rows), ZERO),
                    net_total=sum((r.net for r in rows), ZERO),
                )
            )
        return sections

    def export_rows(self) -> list[dict]:
        """Every team's rows flattened, numbered by one counter across all teams."""
        out: list[dict] = []
        number = 0
        for document in self._documents:
            for record in document.employees:
                number += 1
                out.append(
                    {
                        "No.": number,
                        "Team": document.team_id,
                        "Name": record.name,
                        "Resident ID": record.resident_id,
                        "Contact": record.contact,
                        "Bank": record.bank,
                        "Account Number": record.account_number,
                        "Gross Pay": as_number(parse_amount(record.gross_pay)),
                        "Tax": as_number(parse_amount(record.tax)),
                        "Net Pay": as_number(net_pay(record)),
                        "Remarks": record.remarks,
                    }
                )
        return out

    @property
    def sheet_name(self) -> str:
        return f"{self._period.label} Payroll"

    @property
    def export_filename(self) -> str:
        return f"payroll_{self._period.year}_{self._period.month:02d}.xlsx"

    def export(self) -> Optional[ExportFile]:
        if not self._exporter.ready:
            self._status.info("Spreadsheet export is not ready yet. Try again in a moment.")
            return None

        rows = self.export_rows()
        if not rows:
            self._status.info("There is no data to export.")
            return None

        try:
            exported = self._exporter.export(
                rows,
                columns=EXPORT_COLUMNS,
                sheet_name=self.sheet_name,
                filename=self.export_filename,
                column_widths=EXPORT_COLUMN_WIDTHS,
            )
        except ExportPreconditionError as exc:
            self._status.info(str(exc))
            return None

        logger.info("Exported %d rows for %s", len(rows), self._period.label)
        self._status.success(f"Exported {len(rows)} rows for {self._period.label}.")
        return exported
