"""Case-insensitive substring matching of search terms against table rows."""

import re

from .models import AnnotatedCell, RowMatch, Span, Table


def term_key(term: str) -> str:
    return term.strip().casefold()


def split_terms(query: str) -> list[str]:
    """Split a raw query on commas into trimmed terms, one per distinct key.

    Empty terms are dropped; an all-blank query yields an empty list.
    """
    terms: list[str] = []
    seen: set[str] = set()
    for part in (query or "").split(","):
        term = part.strip()
        key = term_key(term)
        if key and key not in seen:
            seen.add(key)
            terms.append(term)
    return terms


def normalize_terms(query: str) -> list[str]:
    """Case-folded keys of the distinct terms in ``query``, in query order."""
    return [term_key(t) for t in split_terms(query)]


def _term_patterns(terms: list[str]) -> list[tuple[str, re.Pattern]]:
    # the term as typed is matched; its folded form only keys the counts
    return [(term_key(term), re.compile(re.escape(term.strip()), re.IGNORECASE)) for term in terms]


def annotate_cell(text: str, patterns: list[tuple[str, re.Pattern]], counts: dict[str, int]) -> AnnotatedCell:
    """Mark every occurrence of every term in ``text`` and bump ``counts``.

    Spans of different terms may overlap; each term is scanned on its own.
    """
    spans: list[Span] = []
    for term, pattern in patterns:
        for found in pattern.finditer(text):
            spans.append(Span(found.start(), found.end(), term))
            counts[term] += 1
    spans.sort(key=lambda s: (s.start, s.end))
    return AnnotatedCell(text=text, spans=spans)


def match_table(table: Table, terms: list[str]) -> tuple[list[RowMatch], dict[str, int]]:
    """Return the rows containing any term plus per-term occurrence counts.

    Row indexes are 1-based over the data rows. Counts are keyed in term order
    and include terms that never matched (with a zero count).
    """
    counts: dict[str, int] = {term_key(term): 0 for term in terms}
    if not terms:
        return [], counts

    patterns = _term_patterns(terms)
    matched_rows: list[RowMatch] = []
    for row_index, row in enumerate(table.rows, start=1):
        cells = [annotate_cell(text, patterns, counts) for text in row]
        if any(cell.highlighted for cell in cells):
            matched_rows.append(RowMatch(row_index=row_index, cells=cells))
    return matched_rows, counts
