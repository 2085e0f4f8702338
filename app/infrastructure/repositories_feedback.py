# app/infrastructure/repositories_feedback.py
from __future__ import annotations

import json
import os
import tempfile
import threading
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..domain.models import FeedbackEntry
from ..domain.schemas import FeedbackInput
from .exceptions import FeedbackStoreError
from .logging import get_logger, log_store_operation

logger = get_logger(__name__)

_ENTRY_FIELDS = tuple(f.name for f in fields(FeedbackEntry))
_SUBMITTED_FIELDS = ("overall_score", "enjoyment", "accurate", "useful", "suggestion")

# Older files were written with camelCase keys.
_LEGACY_KEYS = {"overallScore": "overall_score", "submittedAt": "submitted_at"}

# One lock per resolved file path, shared by every repo instance in the process.
_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


def _entry_from_record(record: dict[str, Any]) -> FeedbackEntry | None:
    """
    Rebuild an entry from a stored record, or None when it cannot be identified.

    Hand-edited values are coerced the same way submitted feedback is.
    """
    data = {_LEGACY_KEYS.get(k, k): v for k, v in record.items()}
    if not all(name in data for name in _ENTRY_FIELDS):
        return None
    if not isinstance(data["id"], str) or not isinstance(data["submitted_at"], str):
        return None
    try:
        values = FeedbackInput.model_validate({name: data[name] for name in _SUBMITTED_FIELDS})
    except PydanticValidationError:
        return None
    return FeedbackEntry(id=data["id"], submitted_at=data["submitted_at"], **values.model_dump())


class FeedbackRepo:
    """
    Append-only feedback list kept in a single JSON file.
    - A missing, empty or unreadable file reads as an empty list.
    - Writes go to a temp file in the same directory, then replace the original.
    """

    def __init__(self, path: str | Path, indent: int = 2):
        self.path = Path(path)
        self.indent = indent
        self._lock = _lock_for(self.path)

    # ---------- Read ----------
    def _read_records(self) -> list[dict[str, Any]]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning("Feedback file %s unreadable, treating as empty: %s", self.path, exc)
            return []

        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Feedback file %s is not valid JSON, treating as empty", self.path)
            return []
        if not isinstance(data, list):
            logger.warning("Feedback file %s does not hold a list, treating as empty", self.path)
            return []
        return [item for item in data if isinstance(item, dict)]

    def list_all(self) -> list[FeedbackEntry]:
        with self._lock:
            records = self._read_records()
        entries = []
        for record in records:
            entry = _entry_from_record(record)
            if entry is not None:
                entries.append(entry)
        return entries

    def count(self) -> int:
        return len(self.list_all())

    # ---------- Write ----------
    def _write_records(self, records: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=self.indent, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @log_store_operation("append_feedback")
    def append(self, entry: FeedbackEntry) -> FeedbackEntry:
        try:
            with self._lock:
                records = self._read_records()
                records.append(asdict(entry))
                self._write_records(records)
        except OSError as exc:
            raise FeedbackStoreError(str(exc), "append", {"path": str(self.path)}) from exc
        return entry
