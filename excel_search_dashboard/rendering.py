"""HTML for highlighted cells and the JSON payload the dashboard consumes."""

from markupsafe import Markup, escape

from .models import AnnotatedCell, SearchResult

HIGHLIGHT_CLASS = "highlight"


def merged_spans(cell: AnnotatedCell) -> list[tuple[int, int]]:
    """Union of the cell's spans, for display only (counts keep overlaps)."""
    merged: list[tuple[int, int]] = []
    for span in cell.spans:
        if merged and span.start <= merged[-1][1]:
            start, end = merged[-1]
            merged[-1] = (start, max(end, span.end))
        else:
            merged.append((span.start, span.end))
    return merged


def highlight_html(cell: AnnotatedCell) -> Markup:
    text = cell.text
    parts: list[str] = []
    last_end = 0
    for start, end in merged_spans(cell):
        parts.append(str(escape(text[last_end:start])))
        parts.append(f'<mark class="{HIGHLIGHT_CLASS}">{escape(text[start:end])}</mark>')
        last_end = end
    parts.append(str(escape(text[last_end:])))
    return Markup("".join(parts))


def result_payload(result: SearchResult, display_limit: int) -> dict:
    """JSON-ready view of a search; at most ``display_limit`` rows per file."""
    files = []
    for file_result in result.results:
        files.append({
            "fileName": file_result.file_name,
            "header": file_result.header,
            "matchCount": len(file_result.matches),
            "matches": [
                {
                    "serialNumber": m.serial_number,
                    "lineNo": m.row_index,
                    "cells": [c.text for c in m.cells],
                    "html": [str(highlight_html(c)) for c in m.cells],
                    "spans": [[[s.start, s.end] for s in c.spans] for c in m.cells],
                }
                for m in file_result.matches[:display_limit]
            ],
        })
    return {
        "success": True,
        "query": result.query,
        "terms": result.terms,
        "totalMatches": result.total_matches,
        "matchesPerTerm": [[term, count] for term, count in result.per_term_count.items()],
        "results": files,
    }
