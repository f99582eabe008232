"""Uploaded files keyed by name, persisted as one JSON blob."""

import json
import logging
import os
import tempfile
import threading
from typing import Iterable, Iterator, Optional

from .models import StoredFile

logger = logging.getLogger(__name__)


class JsonFileSlot:
    """A single named slot on disk holding the serialized store."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> Optional[str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                return fh.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning("Discarding undecodable file store %s: %s", self.path, e)
            return None

    def write(self, blob: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(blob)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


def dumps(files: Iterable[StoredFile]) -> str:
    return json.dumps([f.to_record() for f in files], ensure_ascii=False)


def loads(blob: Optional[str]) -> list[StoredFile]:
    """Deserialize a store blob; anything unreadable is an empty store."""
    if not blob:
        return []
    try:
        records = json.loads(blob)
        if not isinstance(records, list):
            raise TypeError(f"expected a list, got {type(records).__name__}")
        files = [StoredFile.from_record(r) for r in records]
    except (ValueError, TypeError, KeyError, AttributeError, RecursionError) as e:
        logger.warning("Discarding unreadable file store: %s", e)
        return []

    # names are unique; a hand-edited blob may still repeat one
    by_name: dict[str, StoredFile] = {}
    for f in files:
        by_name[f.name] = f
    return list(by_name.values())


class FileStore:
    """Ordered mapping of file name -> StoredFile.

    New names are appended; an existing name is replaced in place. Every
    mutation is written back to the slot.
    """

    def __init__(self, slot: Optional[JsonFileSlot] = None):
        self._slot = slot
        self._lock = threading.Lock()
        self._files: list[StoredFile] = loads(slot.read()) if slot else []

    @classmethod
    def at_path(cls, path: str) -> "FileStore":
        return cls(JsonFileSlot(path))

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[StoredFile]:
        return iter(self.list())

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._files)

    def list(self) -> list[StoredFile]:
        return list(self._files)

    def get(self, name: str) -> Optional[StoredFile]:
        for f in self._files:
            if f.name == name:
                return f
        return None

    def last_uploaded(self) -> Optional[StoredFile]:
        """The most recently appended file, as the dashboard header shows it."""
        return self._files[-1] if self._files else None

    def upsert(self, file: StoredFile) -> None:
        self.upsert_many([file])

    def upsert_many(self, files: Iterable[StoredFile]) -> None:
        """Apply a batch in input order, then persist once."""
        with self._lock:
            for new in files:
                for idx, existing in enumerate(self._files):
                    if existing.name == new.name:
                        self._files[idx] = new
                        break
                else:
                    self._files.append(new)
            self._save()

    def delete(self, name: str) -> None:
        with self._lock:
            remaining = [f for f in self._files if f.name != name]
            if len(remaining) == len(self._files):
                return
            self._files = remaining
            self._save()

    def _save(self) -> None:
        if self._slot is None:
            return
        self._slot.write(dumps(self._files))
