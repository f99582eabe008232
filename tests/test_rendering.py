from __future__ import annotations

from excel_search_dashboard.aggregator import search
from excel_search_dashboard.matcher import match_table
from excel_search_dashboard.models import Table
from excel_search_dashboard.rendering import highlight_html, merged_spans, result_payload
from tests.conftest import SALES_TABLE, make_file


def _cell(text: str, terms: list[str]):
    rows, _ = match_table(Table(header=["A"], rows=[[text]]), terms)
    return rows[0].cells[0]


def test_highlight_wraps_every_occurrence():
    html = highlight_html(_cell("East and east", ["east"]))
    assert str(html) == '<mark class="highlight">East</mark> and <mark class="highlight">east</mark>'


def test_highlight_escapes_cell_text():
    html = highlight_html(_cell("<script>east</script>", ["east"]))
    assert "<script>" not in str(html)
    assert '&lt;script&gt;<mark class="highlight">east</mark>&lt;/script&gt;' == str(html)


def test_overlapping_spans_render_once():
    cell = _cell("Eastern", ["east", "eas", "stern"])
    assert merged_spans(cell) == [(0, 7)]
    assert str(highlight_html(cell)) == '<mark class="highlight">Eastern</mark>'


def test_payload_shape():
    payload = result_payload(search([make_file("sales.csv", SALES_TABLE)], "east"), display_limit=1)
    assert payload["totalMatches"] == 2
    assert payload["matchesPerTerm"] == [["east", 2]]
    file_payload = payload["results"][0]
    assert file_payload["matchCount"] == 2
    assert len(file_payload["matches"]) == 1
    first = file_payload["matches"][0]
    assert first["serialNumber"] == 1
    assert first["cells"] == ["East", "100"]
    assert first["spans"] == [[[0, 4]], []]
