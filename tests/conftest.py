from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from pathlib import Path

import pandas as pd
import pytest
from werkzeug.security import generate_password_hash

from excel_search_dashboard.app import STORE_EXTENSION, app
from excel_search_dashboard.models import StoredFile
from excel_search_dashboard.store import FileStore

ADMIN_PASSWORD = "letmein"

SALES_TABLE = "Region\tAmount\nEast\t100\nWest\t200\nEast\t300"


def make_file(name: str, raw_table: str, day: int = 1) -> StoredFile:
    return StoredFile(
        name=name,
        raw_table=raw_table,
        uploaded_at=datetime(2024, 1, day, 12, 0, tzinfo=timezone.utc),
    )


def xlsx_bytes(df: pd.DataFrame) -> bytes:
    buf = BytesIO()
    df.to_excel(buf, index=False, engine="openpyxl")
    return buf.getvalue()


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "excelFilesData.json"


@pytest.fixture()
def store(store_path: Path) -> FileStore:
    return FileStore.at_path(str(store_path))


@pytest.fixture()
def client(store_path: Path):
    app.config.update(
        TESTING=True,
        SECRET_KEY="test-secret",
        STORE_PATH=str(store_path),
        ADMIN_PASSWORD_HASH=generate_password_hash(ADMIN_PASSWORD, method="pbkdf2:sha256"),
    )
    app.extensions.pop(STORE_EXTENSION, None)
    with app.test_client() as c:
        yield c
    app.extensions.pop(STORE_EXTENSION, None)


@pytest.fixture()
def admin_client(client):
    resp = client.post("/admin/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client
