from __future__ import annotations

from excel_search_dashboard.aggregator import search
from tests.conftest import SALES_TABLE, make_file


def test_sales_example():
    result = search([make_file("sales.csv", SALES_TABLE)], "east")
    assert result.total_matches == 2
    assert result.per_term_count == {"east": 2}
    assert len(result.results) == 1
    file_result = result.results[0]
    assert file_result.file_name == "sales.csv"
    assert file_result.header == ["Region", "Amount"]
    assert [m.serial_number for m in file_result.matches] == [1, 2]
    assert [m.row_index for m in file_result.matches] == [1, 3]
    assert [m.plain_cells for m in file_result.matches] == [["East", "100"], ["East", "300"]]


def test_serial_numbers_are_contiguous_across_files():
    files = [
        make_file("a.xlsx", "Name\nred\nblue\nred car"),
        make_file("b.xlsx", "Name\ngreen"),
        make_file("c.xlsx", "Name\nRed\nredder"),
    ]
    result = search(files, "red")
    assert [r.file_name for r in result.results] == ["a.xlsx", "c.xlsx"]
    serials = [m.serial_number for r in result.results for m in r.matches]
    assert serials == [1, 2, 3, 4]
    assert result.total_matches == 4
    assert result.per_term_count == {"red": 4}


def test_per_term_counts_follow_query_order():
    files = [make_file("a.xlsx", "Name\nwest\neast\neast")]
    result = search(files, "East, WEST, north")
    assert list(result.per_term_count.items()) == [("east", 2), ("west", 1), ("north", 0)]


def test_blank_query_yields_no_results():
    files = [make_file("sales.csv", SALES_TABLE)]
    for query in ["", "   ", ", ,"]:
        result = search(files, query)
        assert result.results == []
        assert result.total_matches == 0
        assert result.per_term_count == {}
        assert result.terms == []


def test_empty_store_yields_no_results():
    result = search([], "east")
    assert result.is_empty
    assert result.total_matches == 0


def test_header_only_and_empty_files_are_skipped():
    files = [
        make_file("empty.xlsx", ""),
        make_file("header.xlsx", "Region\tAmount"),
        make_file("sales.csv", SALES_TABLE),
    ]
    result = search(files, "region, east")
    assert [r.file_name for r in result.results] == ["sales.csv"]
    assert [m.serial_number for m in result.results[0].matches] == [1, 2]


def test_header_row_is_never_matched():
    result = search([make_file("sales.csv", SALES_TABLE)], "amount")
    assert result.results == []


def test_search_is_deterministic():
    files = [
        make_file("a.xlsx", "Name\tCity\nAnn\tEast Ham\nBob\tWestbury"),
        make_file("b.xlsx", "Name\tCity\nCid\tEastleigh"),
    ]
    assert search(files, "east, bury") == search(files, "east, bury")


def test_query_keeps_length_changing_case_forms():
    files = [make_file("cities.xlsx", "City\nİstanbul\nIzmir")]
    result = search(files, " İstanbul ")
    assert result.total_matches == 1
    assert result.per_term_count == {"İstanbul".casefold(): 1}
    assert result.results[0].matches[0].plain_cells == ["İstanbul"]
