"""Transcript layer: follow one growing transcript and yield only lines appended after subscribe."""

from __future__ import annotations

import asyncio
import enum
import stat
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from mission_control.core.errors import TranscriptNotFoundError, TranscriptUnreadableError
from mission_control.infra.observability.logger import get_logger
from mission_control.transcript.parser import parse_lines, split_complete_lines

logger = get_logger(__name__)


class TailState(str, enum.Enum):
    UNSUBSCRIBED = "unsubscribed"
    TAILING = "tailing"
    CLOSED = "closed"


class TranscriptTail:
    """Per-subscriber read cursor over an append-only transcript.

    The cursor starts at the file size observed on subscribe, so history is
    never replayed. Each `poll()` reads only `[cursor, size)` and advances the
    cursor past complete lines; an unterminated tail fragment stays unread
    until a later poll sees its newline. A file that shrinks below the cursor
    is treated as "nothing new".
    """

    def __init__(self, path: Path, *, session_id: str, poll_seconds: float = 0.5) -> None:
        self._path = path
        self._session_id = session_id
        self._poll_seconds = max(0.01, poll_seconds)
        self._cursor: int | None = None
        self._state = TailState.UNSUBSCRIBED
        self.skipped_lines = 0

    @classmethod
    def open(cls, path: Path, *, session_id: str, poll_seconds: float = 0.5) -> "TranscriptTail":
        tail = cls(path, session_id=session_id, poll_seconds=poll_seconds)
        tail.subscribe()
        return tail

    @property
    def state(self) -> TailState:
        return self._state

    @property
    def cursor(self) -> int | None:
        return self._cursor

    def subscribe(self) -> None:
        if self._state is not TailState.UNSUBSCRIBED:
            raise RuntimeError(f"tail already {self._state.value}")
        try:
            info = self._path.stat()
        except FileNotFoundError as exc:
            raise TranscriptNotFoundError(self._session_id) from exc
        except OSError as exc:
            raise TranscriptUnreadableError(self._session_id, exc.strerror or type(exc).__name__) from exc
        if not stat.S_ISREG(info.st_mode):
            raise TranscriptNotFoundError(self._session_id)
        size = info.st_size
        self._cursor = size
        self._state = TailState.TAILING
        logger.info("tail.subscribed session_id=%s cursor=%s", self._session_id, size)

    def poll(self) -> list[dict[str, Any]]:
        """Run one check and return newly completed events in file order."""
        if self._state is not TailState.TAILING or self._cursor is None:
            return []
        try:
            size = self._path.stat().st_size
            if size <= self._cursor:
                return []
            with self._path.open("rb") as handle:
                handle.seek(self._cursor)
                chunk = handle.read(size - self._cursor)
        except OSError as exc:
            logger.debug("tail.poll.retry session_id=%s error=%s", self._session_id, exc)
            return []

        lines, consumed = split_complete_lines(chunk)
        if not consumed:
            return []
        self._cursor += consumed
        parsed = parse_lines(lines)
        if parsed.skipped:
            self.skipped_lines += parsed.skipped
            logger.debug(
                "tail.poll.skipped session_id=%s lines=%s",
                self._session_id,
                parsed.skipped,
            )
        return parsed.objects

    async def follow(self) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield one batch per check, empty when nothing new, until `close()`.

        A check runs to completion before the next sleep, so checks of one
        subscription never overlap.
        """
        try:
            while self._state is TailState.TAILING:
                yield self.poll()
                if self._state is not TailState.TAILING:
                    break
                await asyncio.sleep(self._poll_seconds)
        finally:
            self.close()

    def close(self) -> None:
        if self._state is TailState.CLOSED:
            return
        was_tailing = self._state is TailState.TAILING
        self._state = TailState.CLOSED
        self._cursor = None
        if was_tailing:
            logger.info("tail.closed session_id=%s", self._session_id)
