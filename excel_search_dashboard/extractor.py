"""Turns uploaded spreadsheet bytes into the tab/newline text table we store."""

import csv
import logging
import os
import re
from datetime import datetime, timezone
from io import BytesIO, StringIO
from typing import Optional

import pandas as pd

from .config import FIELD_DELIMITER, ROW_DELIMITER, UPLOAD_EXTENSIONS
from .models import StoredFile

logger = logging.getLogger(__name__)


class ExtractionError(ValueError):
    """The uploaded bytes could not be read as a spreadsheet."""

    def __init__(self, file_name: str, reason: str):
        super().__init__(f"{file_name}: {reason}")
        self.file_name = file_name
        self.reason = reason


def _clean_text(value: object) -> str:
    """Cell value as single-line text, without Excel line-break artifacts."""
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return str(int(value))
    s = str(value)
    s = (
        s.replace("_x000D_", " ")
        .replace("*x000D*", " ")
        .replace("_x000A_", " ")
        .replace("*x000A*", " ")
        .replace("&nbsp;", " ")
    )
    # tabs and newlines would break the stored table layout
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _read_first_sheet(data: bytes, ext: str) -> pd.DataFrame:
    if ext == ".csv":
        # rows may be wider or narrower than the first one
        text = data.decode("utf-8-sig")
        return pd.DataFrame(list(csv.reader(StringIO(text, newline=""))))
    engine = "openpyxl" if ext == ".xlsx" else "xlrd"
    try:
        return pd.read_excel(BytesIO(data), sheet_name=0, header=None, dtype=object, engine=engine)
    except ImportError:
        # engine not installed: let pandas pick whatever it has
        return pd.read_excel(BytesIO(data), sheet_name=0, header=None, dtype=object)


def frame_to_raw_table(df: pd.DataFrame) -> str:
    """Join cells with tabs and rows with newlines.

    Trailing empty cells are dropped per row and wholly blank rows are skipped.
    """
    lines: list[str] = []
    for values in df.itertuples(index=False, name=None):
        cells = [_clean_text(v) for v in values]
        while cells and cells[-1] == "":
            cells.pop()
        if cells:
            lines.append(FIELD_DELIMITER.join(cells))
    return ROW_DELIMITER.join(lines)


def extract_table(data: bytes, file_name: str, now: Optional[datetime] = None) -> StoredFile:
    """Read the first sheet of an uploaded file into a StoredFile.

    Raises ExtractionError for unsupported extensions and unreadable content.
    """
    ext = os.path.splitext(file_name)[1].lower()
    if ext not in UPLOAD_EXTENSIONS:
        raise ExtractionError(file_name, f"unsupported file type {ext or '(none)'}")
    if not data:
        raise ExtractionError(file_name, "file is empty")

    try:
        df = _read_first_sheet(data, ext)
    except Exception as e:
        logger.debug("pandas failed on %s", file_name, exc_info=True)
        raise ExtractionError(file_name, str(e) or type(e).__name__) from e

    return StoredFile(
        name=file_name,
        raw_table=frame_to_raw_table(df),
        uploaded_at=now or datetime.now(timezone.utc),
    )
