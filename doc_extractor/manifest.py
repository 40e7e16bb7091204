"""Progress manifest for resumable batch extraction.

The manifest is a JSON file mapping each input document to its last
extraction outcome.  A document counts as done only while its fingerprint
(size and modification time) is unchanged, so an edited resume is extracted
again on the next run.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional


class EntryStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    SUCCESS = "success"
    FAILURE = "failure"


def _timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def fingerprint(path: Path) -> str:
    """Cheap change detector for an input document."""
    stat = path.stat()
    return f"{stat.st_size}:{stat.st_mtime_ns}"


@dataclass
class DocumentRecord:
    """Last known extraction outcome for one input document."""

    file: str
    status: EntryStatus = EntryStatus.PENDING
    attempts: int = 0
    fingerprint: Optional[str] = None
    output: Optional[str] = None
    format: Optional[str] = None
    lines: int = 0
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_type: Optional[str] = None
    updated_at: str = field(default_factory=_timestamp)

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "DocumentRecord":
        record = cls(**payload)
        record.status = EntryStatus(record.status)
        return record

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["status"] = self.status.value
        return payload

    def touch(self) -> None:
        self.updated_at = _timestamp()


class BatchManifest:
    VERSION = 1

    def __init__(self, path: Path, records: Optional[Dict[str, DocumentRecord]] = None) -> None:
        self.path = Path(path)
        self.records: Dict[str, DocumentRecord] = records or {}

    @classmethod
    def load(cls, path: Path, *, create: bool = True) -> "BatchManifest":
        path = Path(path)
        if not path.exists():
            if not create:
                raise FileNotFoundError(path)
            return cls(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        version = data.get("version", 0)
        if version != cls.VERSION:
            raise ValueError(f"Unsupported manifest version: {version}")
        records = {
            name: DocumentRecord.from_dict(payload)
            for name, payload in data.get("documents", {}).items()
        }
        return cls(path, records)

    def save(self) -> None:
        """Write the manifest atomically next to its final location."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": self.VERSION,
            "documents": {name: record.to_dict() for name, record in sorted(self.records.items())},
        }
        fd, temp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".manifest-", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        os.replace(temp_name, self.path)

    def record(self, file: str) -> DocumentRecord:
        if file not in self.records:
            self.records[file] = DocumentRecord(file=file)
        return self.records[file]

    def begin(self, file: str, document_fingerprint: Optional[str] = None) -> DocumentRecord:
        record = self.record(file)
        record.attempts += 1
        record.status = EntryStatus.IN_PROGRESS
        record.fingerprint = document_fingerprint
        record.touch()
        return record

    def complete(
        self,
        file: str,
        *,
        output: str,
        format: str,
        lines: int,
        warnings: Iterable[str] = (),
    ) -> DocumentRecord:
        record = self.record(file)
        record.status = EntryStatus.SUCCESS
        record.output = output
        record.format = format
        record.lines = lines
        record.warnings = list(warnings)
        record.error = record.error_type = None
        record.touch()
        return record

    def fail(self, file: str, error: Exception) -> DocumentRecord:
        record = self.record(file)
        record.status = EntryStatus.FAILURE
        record.error = str(error)
        record.error_type = type(error).__name__
        record.touch()
        return record

    def is_done(self, file: str, document_fingerprint: Optional[str] = None) -> bool:
        record = self.records.get(file)
        if record is None or record.status is not EntryStatus.SUCCESS:
            return False
        return document_fingerprint is None or record.fingerprint == document_fingerprint

    def summary(self) -> Dict[str, int]:
        counts = Counter(record.status.value for record in self.records.values())
        return {status.value: counts.get(status.value, 0) for status in EntryStatus}

    def __contains__(self, file: str) -> bool:
        return file in self.records

    def __len__(self) -> int:
        return len(self.records)


__all__ = ["BatchManifest", "DocumentRecord", "EntryStatus", "fingerprint"]
