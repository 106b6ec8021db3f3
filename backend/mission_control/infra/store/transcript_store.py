"""Data layer: read-only access to per-session JSONL transcripts in the workspace directory."""

from __future__ import annotations

import re
import stat
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from mission_control.core.errors import (
    InvalidSessionIdError,
    TranscriptNotFoundError,
    TranscriptUnreadableError,
)
from mission_control.infra.observability.logger import get_logger
from mission_control.transcript.parser import TranscriptView, build_view
from mission_control.transcript.tail import TranscriptTail

logger = get_logger(__name__)

SessionType = Literal["cron", "subagent", "main"]
SessionStatus = Literal["active", "idle"]

TRANSCRIPT_SUFFIX = ".jsonl"
_SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def validate_session_id(session_id: str) -> str:
    """Reject anything outside `[A-Za-z0-9_-]` so ids can never address another path."""
    if not isinstance(session_id, str) or not _SESSION_ID_PATTERN.fullmatch(session_id):
        raise InvalidSessionIdError(str(session_id))
    return session_id


def session_type(session_id: str) -> SessionType:
    lowered = session_id.lower()
    if "cron" in lowered:
        return "cron"
    if "subagent" in lowered or "spawn" in lowered:
        return "subagent"
    return "main"


def session_name(session_id: str) -> str:
    words = [part for part in re.split(r"[-_]+", session_id) if part]
    name = " ".join(word[:1].upper() + word[1:] for word in words) or session_id
    return name[:40]


def display_id(session_id: str) -> str:
    return session_id if len(session_id) <= 12 else f"{session_id[:12]}..."


def humanize_age(seconds: float) -> str:
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    return f"{int(seconds // 86400)}d ago"


def humanize_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def humanize_tokens(tokens: int) -> str:
    if tokens < 1000:
        return str(tokens)
    if tokens < 1_000_000:
        return f"{tokens / 1000:.1f}k"
    return f"{tokens / 1_000_000:.1f}M"


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    display_id: str
    name: str
    type: SessionType
    status: SessionStatus
    last_activity: str
    size: str
    size_bytes: int
    modified_at: float


@dataclass(frozen=True)
class SessionDetail:
    session_id: str
    name: str
    type: SessionType
    status: SessionStatus
    view: TranscriptView


class TranscriptStore:
    """Enumerate and read `<session_id>.jsonl` transcripts; never writes or locks them."""

    def __init__(
        self,
        sessions_dir: Path,
        *,
        active_minutes: int = 60,
        log_limit: int = 50,
        text_limit: int = 200,
    ) -> None:
        self._sessions_dir = sessions_dir
        self._active_seconds = max(1, active_minutes) * 60
        self._log_limit = log_limit
        self._text_limit = text_limit

    @property
    def sessions_dir(self) -> Path:
        return self._sessions_dir

    def health(self) -> dict[str, object]:
        exists = self._sessions_dir.is_dir()
        return {"sessions_dir": str(self._sessions_dir), "available": exists}

    def path_for(self, session_id: str) -> Path:
        validate_session_id(session_id)
        return self._sessions_dir / f"{session_id}{TRANSCRIPT_SUFFIX}"

    def _status(self, modified_at: float, now: float) -> SessionStatus:
        return "active" if now - modified_at < self._active_seconds else "idle"

    def list_sessions(self, limit: int = 20, *, now: float | None = None) -> list[SessionSummary]:
        """Newest-first summaries; an absent or unreadable directory yields an empty list."""
        current = time.time() if now is None else now
        entries: list[tuple[str, float, int]] = []
        try:
            candidates = list(self._sessions_dir.iterdir())
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning("transcripts.list.unreadable dir=%s error=%s", self._sessions_dir, exc)
            return []

        for path in candidates:
            if not path.name.endswith(TRANSCRIPT_SUFFIX) or "deleted" in path.name:
                continue
            session_id = path.name[: -len(TRANSCRIPT_SUFFIX)]
            if not _SESSION_ID_PATTERN.fullmatch(session_id):
                continue
            try:
                info = path.stat()
            except OSError:
                continue
            if not stat.S_ISREG(info.st_mode):
                continue
            entries.append((session_id, info.st_mtime, info.st_size))

        entries.sort(key=lambda item: item[1], reverse=True)
        summaries: list[SessionSummary] = []
        for session_id, modified_at, size in entries[: max(0, limit)]:
            summaries.append(
                SessionSummary(
                    session_id=session_id,
                    display_id=display_id(session_id),
                    name=session_name(session_id),
                    type=session_type(session_id),
                    status=self._status(modified_at, current),
                    last_activity=humanize_age(max(0.0, current - modified_at)),
                    size=humanize_size(size),
                    size_bytes=size,
                    modified_at=modified_at,
                )
            )
        return summaries

    def read_session(self, session_id: str, *, now: float | None = None) -> SessionDetail:
        path = self.path_for(session_id)
        try:
            data = path.read_bytes()
            modified_at = path.stat().st_mtime
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise TranscriptNotFoundError(session_id) from exc
        except OSError as exc:
            logger.warning("transcripts.read.unreadable session_id=%s error=%s", session_id, exc)
            raise TranscriptUnreadableError(session_id, exc.strerror or type(exc).__name__) from exc

        view = build_view(data, log_limit=self._log_limit, text_limit=self._text_limit)
        if view.skipped_lines:
            logger.debug(
                "transcripts.read.skipped session_id=%s lines=%s",
                session_id,
                view.skipped_lines,
            )
        current = time.time() if now is None else now
        return SessionDetail(
            session_id=session_id,
            name=session_name(session_id),
            type=session_type(session_id),
            status=self._status(modified_at, current),
            view=view,
        )

    def open_tail(self, session_id: str, *, poll_seconds: float = 0.5) -> TranscriptTail:
        """Subscribe to appends after this moment; fails fast when the transcript is absent."""
        path = self.path_for(session_id)
        return TranscriptTail.open(path, session_id=session_id, poll_seconds=poll_seconds)
