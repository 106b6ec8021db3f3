"""Transcript layer: split raw bytes into complete lines and derive trace/log views."""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from mission_control.transcript.events import (
    TextItem,
    ThinkingItem,
    ToolCallItem,
    ToolResultItem,
    TranscriptEvent,
    decode_event,
)

TraceLabel = Literal["LLM Response", "Tool Execution"]
TraceState = Literal["running", "success"]
LogKind = Literal["text", "think", "tool", "error"]


@dataclass(frozen=True)
class TraceStep:
    index: int
    label: TraceLabel
    state: TraceState
    timestamp: str | None


@dataclass(frozen=True)
class LogEntry:
    timestamp: str | None
    kind: LogKind
    text: str


@dataclass(frozen=True)
class ParseResult:
    """Parsed JSON objects in file order plus the count of lines dropped."""

    objects: list[dict[str, Any]]
    skipped: int


@dataclass(frozen=True)
class TranscriptView:
    """Derived, never-persisted view over one full transcript read."""

    events: list[TranscriptEvent]
    trace: list[TraceStep]
    logs: list[LogEntry]
    total_tokens: int
    model: str | None
    duration: str | None
    skipped_lines: int


def split_complete_lines(data: bytes) -> tuple[list[bytes], int]:
    """Return newline-terminated lines and the byte count they occupy.

    Bytes after the last newline belong to a line still being written and are
    left out of both the result and the consumed count.
    """
    end = data.rfind(b"\n")
    if end < 0:
        return [], 0
    return data[:end].split(b"\n"), end + 1


def parse_lines(lines: Iterable[bytes]) -> ParseResult:
    objects: list[dict[str, Any]] = []
    skipped = 0
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        try:
            item = json.loads(line.decode("utf-8", errors="replace"))
        except (ValueError, RecursionError):
            skipped += 1
            continue
        if not isinstance(item, dict):
            skipped += 1
            continue
        objects.append(item)
    return ParseResult(objects=objects, skipped=skipped)


def _truncate(text: str, limit: int) -> str:
    compact = " ".join(text.split())
    return compact[:limit]


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            seconds = value / 1000 if value >= 1e12 else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Any) -> str | None:
    """Render numeric epochs as ISO8601; keep strings as written."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    parsed = _to_datetime(value)
    return parsed.isoformat().replace("+00:00", "Z") if parsed else None


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.0f}s"
    if seconds < 3600:
        return f"{seconds / 60:.0f}m"
    return f"{seconds / 3600:.1f}h"


def build_trace(events: Iterable[TranscriptEvent]) -> list[TraceStep]:
    steps: list[TraceStep] = []
    for event in events:
        if not event.is_assistant:
            continue
        uses_tools = event.has_tool_call
        steps.append(
            TraceStep(
                index=len(steps) + 1,
                label="Tool Execution" if uses_tools else "LLM Response",
                state="success" if uses_tools else "running",
                timestamp=format_timestamp(event.timestamp),
            )
        )
    return steps


def log_entries_for(event: TranscriptEvent, *, text_limit: int = 200) -> list[LogEntry]:
    timestamp = format_timestamp(event.timestamp)
    entries: list[LogEntry] = []
    for item in event.items:
        if isinstance(item, TextItem):
            entries.append(LogEntry(timestamp, "text", _truncate(item.text, text_limit)))
        elif isinstance(item, ThinkingItem):
            entries.append(LogEntry(timestamp, "think", _truncate(item.text, text_limit)))
        elif isinstance(item, ToolCallItem):
            entries.append(LogEntry(timestamp, "tool", _truncate(f"{item.name}(...)", text_limit)))
        elif isinstance(item, ToolResultItem):
            kind: LogKind = "error" if item.is_error else "tool"
            entries.append(LogEntry(timestamp, kind, _truncate(f"→ {item.output}", text_limit)))
    return entries


def build_logs(
    events: Iterable[TranscriptEvent],
    *,
    limit: int = 50,
    text_limit: int = 200,
) -> list[LogEntry]:
    """Keep the newest `limit` entries and return them most-recent-first."""
    window: deque[LogEntry] = deque(maxlen=max(1, limit))
    for event in events:
        window.extend(log_entries_for(event, text_limit=text_limit))
    return list(reversed(window))


def _last_total_tokens(events: list[TranscriptEvent]) -> int:
    for event in reversed(events):
        if event.total_tokens:
            return event.total_tokens
    return 0


def _last_model(events: list[TranscriptEvent]) -> str | None:
    for event in reversed(events):
        if event.model:
            return event.model.rsplit("/", 1)[-1] or None
    return None


def _duration(events: list[TranscriptEvent]) -> str | None:
    stamps = [stamp for stamp in (_to_datetime(event.timestamp) for event in events) if stamp]
    if len(stamps) < 2:
        return None
    span = (max(stamps) - min(stamps)).total_seconds()
    return format_duration(span) if span > 0 else None


def build_view(
    data: bytes,
    *,
    log_limit: int = 50,
    text_limit: int = 200,
) -> TranscriptView:
    """Parse a whole transcript body; the trailing unterminated fragment is ignored."""
    lines, _ = split_complete_lines(data)
    parsed = parse_lines(lines)
    events = [decode_event(obj) for obj in parsed.objects]
    return TranscriptView(
        events=events,
        trace=build_trace(events),
        logs=build_logs(events, limit=log_limit, text_limit=text_limit),
        total_tokens=_last_total_tokens(events),
        model=_last_model(events),
        duration=_duration(events),
        skipped_lines=parsed.skipped,
    )
