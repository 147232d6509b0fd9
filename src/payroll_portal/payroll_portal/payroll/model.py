from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import parse_timestamp
from ..common.validators import require_month, require_year
from ..core.exceptions import ValidationError


def new_record_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Period:
    """Selected payroll year/month. Never persisted on its own."""

    year: int
    month: int

    def __post_init__(self):
        require_year(self.year)
        require_month(self.month)

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(self.year - 1, 12)
        return Period(self.year, self.month - 1)

    @property
    def label(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @classmethod
    def from_datetime(cls, value: datetime) -> "Period":
        return cls(value.year, value.month)


def document_key(namespace: str, team_id: str, year: int, month: int) -> str:
    """Composite id of a team-month document; same inputs always give the same key."""
    return f"{namespace}-{team_id}-{int(year)}-{int(month)}"


# Wire name -> attribute name. `rrn` is the key older documents used for the resident id.
_WIRE_FIELDS = {
    "id": "id",
    "name": "name",
    "residentId": "resident_id",
    "grossPay": "gross_pay",
    "tax": "tax",
    "bank": "bank",
    "accountNumber": "account_number",
    "contact": "contact",
    "remarks": "remarks",
}
_LEGACY_FIELDS = {"rrn": "resident_id"}


@dataclass(frozen=True)
class EmployeeRecord:
    """One payroll row. Every value is kept as the text the user entered."""

    id: str = ""
    name: str = ""
    resident_id: str = ""
    gross_pay: str = ""
    tax: str = ""
    bank: str = ""
    account_number: str = ""
    contact: str = ""
    remarks: str = ""

    @classmethod
    def blank(cls, record_id: Optional[str] = None) -> "EmployeeRecord":
        return cls(id=record_id or new_record_id())

    @classmethod
    def editable_fields(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "id")

    def with_field(self, name: str, value: str) -> "EmployeeRecord":
        if name not in self.editable_fields():
            raise ValidationError(f"Unknown employee field: {name}")
        return replace(self, **{name: "" if value is None else str(value)})

    def with_id(self, record_id: str) -> "EmployeeRecord":
        return replace(self, id=record_id)

    def to_dict(self) -> dict[str, str]:
        return {wire: getattr(self, attr) for wire, attr in _WIRE_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmployeeRecord":
        values: dict[str, str] = {}
        for wire, attr in _LEGACY_FIELDS.items():
            if data.get(wire) is not None:
                values[attr] = str(data[wire])
        for wire, attr in _WIRE_FIELDS.items():
            if data.get(wire) is not None:
                values[attr] = str(data[wire])
        return cls(**values)


@dataclass(frozen=True)
class PayrollDocument:
    """All payroll rows of one team for one month."""

    team_id: str
    year: int
    month: int
    employees: tuple[EmployeeRecord, ...] = field(default_factory=tuple)
    updated_at: Optional[datetime] = None

    @property
    def period(self) -> Period:
        return Period(self.year, self.month)

    @classmethod
    def empty(cls, team_id: str, year: int, month: int) -> "PayrollDocument":
        return cls(team_id=team_id, year=int(year), month=int(month))

    def with_employees(self, employees: Iterable[EmployeeRecord]) -> "PayrollDocument":
        return replace(self, employees=tuple(employees))

    def to_dict(self) -> dict[str, Any]:
        return {
            "teamId": self.team_id,
            "year": int(self.year),
            "month": int(self.month),
            "employees": [e.to_dict() for e in self.employees],
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PayrollDocument":
        try:
            return cls(
                team_id=str(data["teamId"]),
                year=int(data["year"]),
                month=int(data["month"]),
                employees=tuple(EmployeeRecord.from_dict(e) for e in (data.get("employees") or [])),
                updated_at=parse_timestamp(data.get("updatedAt")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError(f"Malformed payroll document: {exc}") from exc
