"""Stream API layer: SSE live tail of one session transcript with keep-alive comments."""

from __future__ import annotations

import json
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from mission_control.api.deps import get_container, to_http_error
from mission_control.core.container import AppContainer
from mission_control.core.errors import MissionControlError
from mission_control.transcript.tail import TranscriptTail

router = APIRouter(tags=["stream"])


def _format_sse(*, event: str, data: Any, event_id: int) -> str:
    body = json.dumps(data, ensure_ascii=False)
    return f"id: {event_id}\nevent: {event}\ndata: {body}\n\n"


async def tail_stream(
    tail: TranscriptTail,
    *,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive_seconds: float,
) -> AsyncIterator[str]:
    """Emit one SSE frame per appended line until the client goes away."""
    event_id = 0
    last_sent = time.monotonic()
    batches = tail.follow()
    try:
        async for batch in batches:
            if await is_disconnected():
                break
            for event in batch:
                event_id += 1
                last_sent = time.monotonic()
                yield _format_sse(event="transcript", data=event, event_id=event_id)
            if time.monotonic() - last_sent >= keepalive_seconds:
                last_sent = time.monotonic()
                yield ": keep-alive\n\n"
    finally:
        await batches.aclose()
        tail.close()


@router.get("/api/sessions/{session_id}/stream")
async def stream_session(
    session_id: str,
    request: Request,
    container: AppContainer = Depends(get_container),
) -> StreamingResponse:
    settings = container.settings
    try:
        tail = container.transcripts.open_tail(session_id, poll_seconds=settings.tail_poll_seconds)
    except MissionControlError as exc:
        raise to_http_error(exc) from exc

    return StreamingResponse(
        tail_stream(
            tail,
            is_disconnected=request.is_disconnected,
            keepalive_seconds=settings.sse_keepalive_seconds,
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
