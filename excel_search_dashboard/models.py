from dataclasses import dataclass, field
from datetime import datetime, timezone

from .config import FIELD_DELIMITER, ROW_DELIMITER


@dataclass
class StoredFile:
    """One uploaded spreadsheet: its first sheet as delimited text."""

    name: str
    raw_table: str
    uploaded_at: datetime

    def to_record(self) -> dict:
        return {
            "fileName": self.name,
            "data": self.raw_table,
            "uploadDate": self.uploaded_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: dict) -> "StoredFile":
        """Rebuild from a persisted record; raises on missing keys or bad types."""
        name = record["fileName"]
        data = record["data"]
        if not isinstance(name, str) or not isinstance(data, str):
            raise TypeError("fileName and data must be strings")
        uploaded_at = datetime.fromisoformat(record["uploadDate"])
        if uploaded_at.tzinfo is None:
            uploaded_at = uploaded_at.replace(tzinfo=timezone.utc)
        return cls(name=name, raw_table=data, uploaded_at=uploaded_at)

    @property
    def row_count(self) -> int:
        return len(Table.parse(self.raw_table).rows)


@dataclass
class Table:
    header: list[str]
    rows: list[list[str]]

    @classmethod
    def parse(cls, raw_table: str) -> "Table":
        """Header is the first line, rows are the rest; no padding of short rows."""
        if not raw_table:
            return cls(header=[], rows=[])
        lines = raw_table.split(ROW_DELIMITER)
        header = lines[0].split(FIELD_DELIMITER)
        rows = [line.split(FIELD_DELIMITER) for line in lines[1:]]
        return cls(header=header, rows=rows)


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    term: str


@dataclass
class AnnotatedCell:
    text: str
    spans: list[Span] = field(default_factory=list)

    @property
    def highlighted(self) -> bool:
        return bool(self.spans)


@dataclass
class RowMatch:
    row_index: int  # 1-based, header excluded
    cells: list[AnnotatedCell]


@dataclass
class Match:
    serial_number: int
    source_file: str
    row_index: int
    cells: list[AnnotatedCell]

    @property
    def plain_cells(self) -> list[str]:
        return [cell.text for cell in self.cells]


@dataclass
class FileResult:
    file_name: str
    header: list[str]
    matches: list[Match]


@dataclass
class SearchResult:
    query: str
    terms: list[str] = field(default_factory=list)
    results: list[FileResult] = field(default_factory=list)
    total_matches: int = 0
    per_term_count: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.results
