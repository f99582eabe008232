"""Workbook and CSV exports of a search result."""

from dataclasses import dataclass
from io import BytesIO, StringIO

import pandas as pd

from .models import SearchResult

SERIAL_HEADER = "S.NO"


class EmptyExportError(ValueError):
    """Raised when there are no results to export."""


@dataclass
class ExportSheet:
    name: str
    file_name: str
    rows: list[list[object]]  # first row is the header

    @property
    def header(self) -> list[object]:
        return self.rows[0]

    @property
    def body(self) -> list[list[object]]:
        return self.rows[1:]


def build_export_sheets(result: SearchResult) -> list[ExportSheet]:
    """One sheet per file result: serial number followed by the plain cell text."""
    if result.is_empty:
        raise EmptyExportError("No results to export.")
    sheets: list[ExportSheet] = []
    for index, file_result in enumerate(result.results, start=1):
        rows: list[list[object]] = [[SERIAL_HEADER, *file_result.header]]
        for match in file_result.matches:
            rows.append([match.serial_number, *match.plain_cells])
        sheets.append(ExportSheet(name=f"Results {index}", file_name=file_result.file_name, rows=rows))
    return sheets


def _frame(rows: list[list[object]]) -> pd.DataFrame:
    # the header goes in as a data row: file headers may repeat or be blank
    return pd.DataFrame(rows).fillna("")


def write_workbook(sheets: list[ExportSheet]) -> BytesIO:
    """Return XLSX in-memory."""
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet in sheets:
            _frame(sheet.rows).to_excel(writer, index=False, header=False, sheet_name=sheet.name)
    output.seek(0)
    return output


def write_csv(sheets: list[ExportSheet]) -> BytesIO:
    """All sheets in one CSV, each block led by its header and a File column."""
    rows: list[list[object]] = []
    for sheet in sheets:
        rows.append(["File", *sheet.header])
        rows.extend([sheet.file_name, *r] for r in sheet.body)
    csv_buf = StringIO()
    _frame(rows).to_csv(csv_buf, index=False, header=False)
    return BytesIO(csv_buf.getvalue().encode("utf-8"))
