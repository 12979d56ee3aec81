from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Protocol

from talentdesk.core.ids import ids_equal, normalize_id

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class LocalStorage(Protocol):
    """Synchronous key-value capability holding JSON-compatible values."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, Any] | None = None):
        self._items: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any | None:
        raw = self._items.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: Any) -> None:
        self._items[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._items)


class JsonFileStorage:
    """One JSON file per key under ``root``; writes replace the file atomically."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.root / f"{safe}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable local store file %s: %s", path, exc)
            return None

    def set(self, key: str, value: Any) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(value, handle, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class RecordCache:
    """List-of-records cache under ``<kind>:<user_id>`` keys."""

    def __init__(self, storage: LocalStorage, kind: str, user_id: str):
        self.storage = storage
        self.key = f"{kind}:{normalize_id(user_id) or 'anonymous'}"

    def load(self) -> list[Record]:
        value = self.storage.get(self.key)
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    def save(self, records: list[Record]) -> None:
        self.storage.set(self.key, records)

    def clear(self) -> None:
        self.storage.remove(self.key)


class InterviewStore(RecordCache):
    """Interview records kept on this machine for one signed-in user."""

    def __init__(self, storage: LocalStorage, user_id: str):
        super().__init__(storage, "interviews", user_id)

    def find(self, interview_id: Any) -> Record | None:
        for record in self.load():
            if ids_equal(record, interview_id):
                return record
        return None

    def upsert(self, record: Record) -> Record:
        records = self.load()
        for index, existing in enumerate(records):
            if ids_equal(existing, record):
                records[index] = record
                break
        else:
            records.append(record)
        self.save(records)
        return record

    def append(self, record: Record) -> Record:
        records = self.load()
        records.append(record)
        self.save(records)
        return record

    def remove(self, interview_id: Any) -> bool:
        records = self.load()
        kept = [record for record in records if not ids_equal(record, interview_id)]
        if len(kept) == len(records):
            return False
        self.save(kept)
        return True


class SessionStore:
    """Signed-in user kept under the ``user`` key for restore on the next run."""

    KEY = "user"

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def load(self) -> Record | None:
        value = self.storage.get(self.KEY)
        return value if isinstance(value, dict) else None

    def save(self, user: Record) -> None:
        self.storage.set(self.KEY, user)

    def clear(self) -> None:
        self.storage.remove(self.KEY)
