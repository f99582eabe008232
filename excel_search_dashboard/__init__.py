"""Upload spreadsheets and run comma-separated keyword searches across their rows."""

from .aggregator import search
from .extractor import ExtractionError, extract_table
from .matcher import match_table, normalize_terms
from .models import AnnotatedCell, FileResult, Match, SearchResult, Span, StoredFile, Table
from .store import FileStore

__version__ = "1.0.0"

__all__ = [
    "AnnotatedCell",
    "ExtractionError",
    "FileResult",
    "FileStore",
    "Match",
    "SearchResult",
    "Span",
    "StoredFile",
    "Table",
    "extract_table",
    "match_table",
    "normalize_terms",
    "search",
]
