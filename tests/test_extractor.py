from __future__ import annotations

from datetime import datetime, timezone

import pandas as pd
import pytest

from excel_search_dashboard.extractor import ExtractionError, extract_table, frame_to_raw_table
from tests.conftest import xlsx_bytes


def test_extract_xlsx_first_sheet():
    df = pd.DataFrame({"Region": ["East", "West", "East"], "Amount": [100, 200, 300]})
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    stored = extract_table(xlsx_bytes(df), "sales.xlsx", now=now)
    assert stored.name == "sales.xlsx"
    assert stored.uploaded_at == now
    assert stored.raw_table == "Region\tAmount\nEast\t100\nWest\t200\nEast\t300"
    assert stored.row_count == 3


def test_extract_csv():
    data = b"Region,Amount\nEast,100\nWest,\n"
    stored = extract_table(data, "Fleet Data.csv")
    assert stored.raw_table == "Region\tAmount\nEast\t100\nWest"
    assert stored.uploaded_at.tzinfo is not None


def test_cells_with_tabs_and_newlines_stay_on_one_line():
    df = pd.DataFrame({"Notes": ["line one\nline two", "tab\there"], "Id": ["1", "2"]})
    stored = extract_table(xlsx_bytes(df), "notes.xlsx")
    assert stored.raw_table.split("\n") == ["Notes\tId", "line one line two\t1", "tab here\t2"]


def test_blank_rows_are_dropped():
    df = pd.DataFrame([["a", "b"], [None, None], ["c", None]], columns=["X", "Y"])
    assert frame_to_raw_table(df) == "a\tb\nc"


def test_integral_floats_render_without_decimal():
    df = pd.DataFrame([[1.0, 2.5, float("nan")]])
    assert frame_to_raw_table(df) == "1\t2.5"


def test_unsupported_extension():
    with pytest.raises(ExtractionError) as exc:
        extract_table(b"hello", "notes.txt")
    assert exc.value.file_name == "notes.txt"


def test_unreadable_bytes_raise_extraction_error():
    with pytest.raises(ExtractionError):
        extract_table(b"this is not a workbook", "broken.xlsx")


def test_empty_upload():
    with pytest.raises(ExtractionError):
        extract_table(b"", "empty.xlsx")


def test_ragged_csv_rows_are_kept():
    data = b"Region,Amount\nEast,100,extra\nWest\n"
    stored = extract_table(data, "ragged.csv")
    assert stored.raw_table == "Region\tAmount\nEast\t100\textra\nWest"
