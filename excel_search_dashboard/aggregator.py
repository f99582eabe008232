"""Runs the matcher over every stored file and numbers the matches globally."""

import logging
from typing import Iterable

from .matcher import match_table, split_terms, term_key
from .models import FileResult, Match, SearchResult, StoredFile, Table

logger = logging.getLogger(__name__)


def _file_result(stored: StoredFile, terms: list[str], next_serial: int) -> tuple[FileResult, dict[str, int], int]:
    """Match one file; return its result, its term counts and the next free serial."""
    table = Table.parse(stored.raw_table)
    if not table.rows:
        return FileResult(stored.name, table.header, []), {}, next_serial

    row_matches, counts = match_table(table, terms)
    matches = [
        Match(
            serial_number=next_serial + offset,
            source_file=stored.name,
            row_index=row.row_index,
            cells=row.cells,
        )
        for offset, row in enumerate(row_matches)
    ]
    return FileResult(stored.name, table.header, matches), counts, next_serial + len(matches)


def search(files: Iterable[StoredFile], query: str) -> SearchResult:
    """Search every file for the comma-separated terms in ``query``.

    An empty term list or an empty store gives an empty result. Files with no
    matching rows are left out and consume no serial numbers.
    """
    terms = split_terms(query)
    files = list(files)
    outcome = SearchResult(query=query, terms=[term_key(t) for t in terms])
    if not terms or not files:
        return outcome

    outcome.per_term_count = {key: 0 for key in outcome.terms}
    next_serial = 1
    for stored in files:
        file_result, counts, next_serial = _file_result(stored, terms, next_serial)
        if not file_result.matches:
            continue
        outcome.results.append(file_result)
        outcome.total_matches += len(file_result.matches)
        for term, count in counts.items():
            outcome.per_term_count[term] += count

    logger.debug(
        "search %r: %d terms, %d files scanned, %d matches",
        query, len(terms), len(files), outcome.total_matches,
    )
    return outcome
