from __future__ import annotations

from openpyxl import load_workbook
import pytest

from excel_search_dashboard.aggregator import search
from excel_search_dashboard.exporter import EmptyExportError, build_export_sheets, write_csv, write_workbook
from tests.conftest import SALES_TABLE, make_file


def _sales_result():
    return search([make_file("sales.csv", SALES_TABLE)], "east")


def test_export_sheet_rows():
    sheets = build_export_sheets(_sales_result())
    assert len(sheets) == 1
    assert sheets[0].name == "Results 1"
    assert sheets[0].rows == [["S.NO", "Region", "Amount"], [1, "East", "100"], [2, "East", "300"]]


def test_export_uses_plain_text_not_markup():
    result = search([make_file("notes.xlsx", "Note\n<b>east</b> wing")], "east")
    sheets = build_export_sheets(result)
    assert sheets[0].rows[1] == [1, "<b>east</b> wing"]


def test_one_sheet_per_file_result():
    files = [
        make_file("a.xlsx", "Name\nred"),
        make_file("b.xlsx", "Name\nblue"),
        make_file("c.xlsx", "Colour\tName\nx\tred"),
    ]
    sheets = build_export_sheets(search(files, "red"))
    assert [(s.name, s.file_name) for s in sheets] == [("Results 1", "a.xlsx"), ("Results 2", "c.xlsx")]
    assert sheets[1].rows == [["S.NO", "Colour", "Name"], [2, "x", "red"]]


def test_empty_results_are_not_exported():
    with pytest.raises(EmptyExportError):
        build_export_sheets(search([make_file("sales.csv", SALES_TABLE)], "nowhere"))


def test_workbook_contents():
    output = write_workbook(build_export_sheets(_sales_result()))
    wb = load_workbook(output)
    assert wb.sheetnames == ["Results 1"]
    rows = [list(r) for r in wb["Results 1"].iter_rows(values_only=True)]
    assert rows == [["S.NO", "Region", "Amount"], [1, "East", "100"], [2, "East", "300"]]


def test_csv_contents():
    output = write_csv(build_export_sheets(_sales_result()))
    lines = output.getvalue().decode("utf-8").splitlines()
    assert lines == ["File,S.NO,Region,Amount", "sales.csv,1,East,100", "sales.csv,2,East,300"]
