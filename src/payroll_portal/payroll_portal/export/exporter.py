from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, Sequence


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    mimetype: str


class SpreadsheetExporter(Protocol):
    """Turns a row set into a downloadable spreadsheet.

    ``ready`` must be checked before calling ``export``.
    """

    @property
    def ready(self) -> bool:
        raise NotImplementedError

    def export(
        self,
        rows: Sequence[Mapping[str, Any]],
        *,
        columns: Sequence[str],
        sheet_name: str,
        filename: str,
        column_widths: Mapping[str, int],
    ) -> ExportFile:
        raise NotImplementedError
