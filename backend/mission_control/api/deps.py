"""API layer: dependency helpers to access shared container from request state."""

from __future__ import annotations

from fastapi import HTTPException, Request

from mission_control.core.container import AppContainer
from mission_control.core.errors import (
    InvalidSessionIdError,
    MissionControlError,
    TranscriptNotFoundError,
)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container  # type: ignore[return-value]


def to_http_error(exc: MissionControlError) -> HTTPException:
    if isinstance(exc, InvalidSessionIdError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TranscriptNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
