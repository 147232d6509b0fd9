from datetime import datetime

import pytest

from src.payroll_portal.payroll_portal.core.exceptions import ValidationError
from src.payroll_portal.payroll_portal.payroll.model import EmployeeRecord, PayrollDocument, Period, document_key


def test_document_key_is_deterministic():
    assert document_key("payroll-app-v1", "3", 2024, 5) == "payroll-app-v1-3-2024-5"
    assert document_key("payroll-app-v1", "3", 2024, 5) == document_key("payroll-app-v1", "3", 2024, 5)
    assert document_key("payroll-app-v1", "3", 2024, 5) != document_key("payroll-app-v1", "3", 2024, 6)


def test_previous_period_rolls_back_over_january():
    assert Period(2024, 1).previous() == Period(2023, 12)
    assert Period(2024, 7).previous() == Period(2024, 6)


@pytest.mark.parametrize("month", [0, 13])
def test_period_rejects_out_of_range_month(month):
    with pytest.raises(ValidationError):
        Period(2024, month)


def test_period_label():
    assert Period(2024, 3).label == "2024-03"


def test_legacy_record_without_tax_and_with_rrn_reads_into_current_schema():
    record = EmployeeRecord.from_dict({"id": "a", "name": "Kim", "rrn": "900101-1******", "grossPay": "1000"})

    assert record.resident_id == "900101-1******"
    assert record.tax == ""
    assert record.to_dict()["residentId"] == "900101-1******"
    assert record.to_dict()["tax"] == ""
    assert "rrn" not in record.to_dict()


def test_with_field_rejects_unknown_field():
    with pytest.raises(ValidationError):
        EmployeeRecord.blank("a").with_field("salary", "1")


def test_with_field_does_not_touch_the_id():
    with pytest.raises(ValidationError):
        EmployeeRecord.blank("a").with_field("id", "b")


def test_document_dict_round_trip_keeps_order_and_timestamp():
    doc = PayrollDocument(
        team_id="1",
        year=2024,
        month=5,
        employees=(EmployeeRecord(id="a", name="Kim"), EmployeeRecord(id="b", name="Lee")),
        updated_at=datetime(2024, 5, 31, 18, 0),
    )

    again = PayrollDocument.from_dict(doc.to_dict())

    assert again == doc
    assert [e.name for e in again.employees] == ["Kim", "Lee"]


def test_malformed_document_raises_validation_error():
    with pytest.raises(ValidationError):
        PayrollDocument.from_dict({"teamId": "1", "year": "x", "month": 5})
