"""Data layer: bounded in-memory history of manual cron runs."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Literal

CronRunStatus = Literal["success", "failed"]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class CronRunRecord:
    cron_id: str
    name: str
    status: CronRunStatus
    duration_ms: int
    output_preview: str = ""
    timestamp: str = field(default_factory=utc_now_iso)


class CronHistoryStore:
    """Keep the most recent runs; oldest entries fall off once `max_records` is reached."""

    def __init__(self, max_records: int = 100) -> None:
        self._max_records = max(1, max_records)
        self._records: deque[CronRunRecord] = deque(maxlen=self._max_records)
        self._lock = Lock()

    def append(self, record: CronRunRecord) -> CronRunRecord:
        with self._lock:
            self._records.append(record)
            return record

    def get(self, *, limit: int | None = None) -> list[CronRunRecord]:
        """Return runs newest-first."""
        with self._lock:
            records = list(reversed(self._records))
        if limit is not None:
            return records[: max(0, limit)]
        return records

    def trim(self, keep: int) -> int:
        """Drop all but the newest `keep` runs; return how many were removed."""
        with self._lock:
            removed = 0
            while len(self._records) > max(0, keep):
                self._records.popleft()
                removed += 1
            return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
