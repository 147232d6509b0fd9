import io

import pytest
from openpyxl import load_workbook

from src.payroll_portal.payroll_portal.core.exceptions import ExportPreconditionError
from src.payroll_portal.payroll_portal.export.excel_exporter import PandasExcelExporter, safe_sheet_name


def test_export_builds_a_single_sheet_workbook():
    exporter = PandasExcelExporter()
    rows = [{"No.": 1, "Name": "Kim", "Net Pay": 270}, {"No.": 2, "Name": "Lee", "Net Pay": 0}]

    exported = exporter.export(
        rows,
        columns=["No.", "Name", "Net Pay"],
        sheet_name="2024-05 Payroll",
        filename="payroll_2024_05.xlsx",
        column_widths={"Name": 12},
    )

    wb = load_workbook(io.BytesIO(exported.content))
    assert wb.sheetnames == ["2024-05 Payroll"]
    ws = wb["2024-05 Payroll"]
    assert [c.value for c in ws[1]] == ["No.", "Name", "Net Pay"]
    assert [c.value for c in ws[2]] == [1, "Kim", 270]
    assert ws.column_dimensions["B"].width == 12
    assert exported.filename == "payroll_2024_05.xlsx"


def test_disabled_exporter_is_not_ready_and_refuses():
    exporter = PandasExcelExporter(enabled=False)

    assert exporter.ready is False
    with pytest.raises(ExportPreconditionError):
        exporter.export([], columns=["A"], sheet_name="s", filename="f.xlsx", column_widths={})


def test_safe_sheet_name_strips_forbidden_characters_and_length():
    assert safe_sheet_name("2024/05: Payroll") == "2024-05- Payroll"
    assert len(safe_sheet_name("x" * 40)) == 31
