"""Unit tests for the per-subscriber transcript tail cursor."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from mission_control.core.errors import TranscriptNotFoundError, TranscriptUnreadableError
from mission_control.transcript.tail import TailState, TranscriptTail


def _append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8") as handle:
        handle.write(text)


def _event(n: int) -> str:
    return json.dumps({"type": "message", "seq": n, "message": {"role": "assistant", "content": f"E{n}"}})


def test_subscribe_starts_at_current_size_and_skips_history(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text(_event(0) + "\n", encoding="utf-8")

    tail = TranscriptTail.open(path, session_id="main")

    assert tail.state is TailState.TAILING
    assert tail.cursor == path.stat().st_size
    assert tail.poll() == []


def test_subscribe_fails_for_missing_file(tmp_path: Path) -> None:
    tail = TranscriptTail(tmp_path / "missing.jsonl", session_id="missing")

    with pytest.raises(TranscriptNotFoundError):
        tail.subscribe()
    assert tail.state is TailState.UNSUBSCRIBED


def test_chunked_appends_are_delivered_once_in_order(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text("", encoding="utf-8")
    tail = TranscriptTail.open(path, session_id="main")

    first, second, third = _event(1), _event(2), _event(3)
    delivered: list[dict] = []

    _append(path, first[:10])
    delivered += tail.poll()
    assert delivered == []

    _append(path, first[10:] + "\n" + second[:5])
    delivered += tail.poll()
    _append(path, second[5:] + "\n")
    delivered += tail.poll()
    delivered += tail.poll()
    _append(path, third + "\n")
    delivered += tail.poll()

    assert [item["seq"] for item in delivered] == [1, 2, 3]


def test_malformed_lines_are_dropped(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text("", encoding="utf-8")
    tail = TranscriptTail.open(path, session_id="main")

    _append(path, "{oops\n" + _event(1) + "\n\n")

    assert [item["seq"] for item in tail.poll()] == [1]
    assert tail.skipped_lines == 1


def test_truncation_below_cursor_is_a_noop(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text(_event(0) + "\n" + _event(1) + "\n", encoding="utf-8")
    tail = TranscriptTail.open(path, session_id="main")
    cursor = tail.cursor

    path.write_text(_event(9) + "\n", encoding="utf-8")

    assert tail.poll() == []
    assert tail.cursor == cursor
    assert tail.state is TailState.TAILING


def test_close_discards_cursor_and_stops_polling(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text("", encoding="utf-8")
    tail = TranscriptTail.open(path, session_id="main")

    tail.close()
    _append(path, _event(1) + "\n")

    assert tail.state is TailState.CLOSED
    assert tail.cursor is None
    assert tail.poll() == []


def test_follow_delivers_appends_made_between_checks(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text(_event(0) + "\n", encoding="utf-8")

    async def scenario() -> list[int]:
        tail = TranscriptTail.open(path, session_id="main", poll_seconds=0.01)

        async def writer() -> None:
            for n in (1, 2, 3):
                await asyncio.sleep(0.03)
                line = _event(n) + "\n"
                _append(path, line[:7])
                await asyncio.sleep(0.02)
                _append(path, line[7:])

        seen: list[int] = []
        writer_task = asyncio.create_task(writer())
        batches = tail.follow()
        async for batch in batches:
            seen.extend(item["seq"] for item in batch)
            if len(seen) >= 3:
                break
        await batches.aclose()
        await writer_task
        assert tail.state is TailState.CLOSED
        return seen

    assert asyncio.run(asyncio.wait_for(scenario(), timeout=5)) == [1, 2, 3]


def test_unparseable_line_between_good_ones_keeps_tailing(tmp_path: Path) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text("", encoding="utf-8")
    tail = TranscriptTail.open(path, session_id="main")

    _append(path, _event(1) + "\n" + "[" * 100_000 + "]" * 100_000 + "\n" + _event(2) + "\n")
    first = tail.poll()
    _append(path, '{"n": ' + "9" * 5000 + "}\n" + _event(3) + "\n")
    second = tail.poll()

    assert [item["seq"] for item in first] == [1, 2]
    assert [item["seq"] for item in second if "seq" in item] == [3]
    assert tail.state is TailState.TAILING
    assert tail.skipped_lines >= 1


def test_subscribe_treats_directory_as_missing(tmp_path: Path) -> None:
    (tmp_path / "main.jsonl").mkdir()
    tail = TranscriptTail(tmp_path / "main.jsonl", session_id="main")

    with pytest.raises(TranscriptNotFoundError):
        tail.subscribe()
    assert tail.state is TailState.UNSUBSCRIBED


def test_subscribe_maps_other_os_errors_to_unreadable(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "main.jsonl"
    path.write_text("", encoding="utf-8")

    def deny(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "stat", deny)
    tail = TranscriptTail(path, session_id="main")

    with pytest.raises(TranscriptUnreadableError, match="Permission denied"):
        tail.subscribe()
    assert tail.state is TailState.UNSUBSCRIBED
