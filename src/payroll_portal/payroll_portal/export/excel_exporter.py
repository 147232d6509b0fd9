from __future__ import annotations

import io
import re
from typing import Any, Mapping, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from ..core.constants import EXPORT_MIMETYPE
from ..core.exceptions import ExportPreconditionError
from .exporter import ExportFile, SpreadsheetExporter

_SHEET_FORBIDDEN = re.compile(r"[\[\]:*?/\\]")


def safe_sheet_name(name: str) -> str:
    # Excel: max 31 chars, no []:*?/\
    cleaned = _SHEET_FORBIDDEN.sub("-", name).strip() or "Sheet1"
    return cleaned[:31]


class PandasExcelExporter(SpreadsheetExporter):
    """xlsx export with pandas + openpyxl, built in memory."""

    def __init__(self, *, enabled: bool = True):
        self._enabled = enabled

    @property
    def ready(self) -> bool:
        return self._enabled

    def export(
        self,
        rows: Sequence[Mapping[str, Any]],
        *,
        columns: Sequence[str],
        sheet_name: str,
        filename: str,
        column_widths: Mapping[str, int],
    ) -> ExportFile:
        if not self._enabled:
            raise ExportPreconditionError("Spreadsheet export is not available")

        df = pd.DataFrame(list(rows), columns=list(columns))
        sheet = safe_sheet_name(sheet_name)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=sheet)
            worksheet = writer.sheets[sheet]
            for idx, column in enumerate(columns, start=1):
                width = column_widths.get(column)
                if width:
                    worksheet.column_dimensions[get_column_letter(idx)].width = width

        return ExportFile(filename=filename, content=output.getvalue(), mimetype=EXPORT_MIMETYPE)
