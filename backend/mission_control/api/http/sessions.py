"""HTTP API layer: session list and parsed transcript detail endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from mission_control.api.deps import get_container, to_http_error
from mission_control.core.container import AppContainer
from mission_control.core.errors import MissionControlError
from mission_control.infra.observability.logger import get_logger
from mission_control.infra.store.placeholders import PlaceholderSession
from mission_control.infra.store.transcript_store import (
    SessionDetail,
    SessionSummary,
    display_id,
    humanize_tokens,
)
from mission_control.protocol.messages import (
    LogEntryDto,
    SessionDetailDto,
    SessionListResponse,
    SessionSummaryDto,
    TraceStepDto,
)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])
logger = get_logger(__name__)


def _summary_dto(summary: SessionSummary) -> SessionSummaryDto:
    updated_at = datetime.fromtimestamp(summary.modified_at, tz=timezone.utc)
    return SessionSummaryDto(
        id=summary.session_id,
        display_id=summary.display_id,
        name=summary.name,
        type=summary.type,
        status=summary.status,
        last_activity=summary.last_activity,
        size=summary.size,
        updated_at=updated_at.replace(microsecond=0).isoformat().replace("+00:00", "Z"),
    )


def _placeholder_dto(row: PlaceholderSession) -> SessionSummaryDto:
    return SessionSummaryDto(
        id=row.session_id,
        display_id=display_id(row.session_id),
        name=row.name,
        type=row.type,
        status=row.status,
        last_activity=row.last_activity,
        size="-",
    )


def _detail_dto(detail: SessionDetail) -> SessionDetailDto:
    view = detail.view
    return SessionDetailDto(
        id=detail.session_id,
        name=detail.name,
        type=detail.type,
        status=detail.status,
        tokens=humanize_tokens(view.total_tokens),
        total_tokens=view.total_tokens,
        model=view.model,
        duration=view.duration,
        event_count=len(view.events),
        logs=[
            LogEntryDto(timestamp=entry.timestamp, type=entry.kind, text=entry.text)
            for entry in view.logs
        ],
        trace=[
            TraceStepDto(
                index=step.index,
                label=step.label,
                status=step.state,
                timestamp=step.timestamp,
            )
            for step in view.trace
        ],
    )


@router.get("", response_model=SessionListResponse)
def list_sessions(
    limit: int | None = Query(default=None, ge=1, le=200),
    container: AppContainer = Depends(get_container),
) -> SessionListResponse:
    effective = limit or container.settings.session_list_limit
    summaries = container.transcripts.list_sessions(effective)
    if not summaries:
        logger.info(
            "api.sessions.placeholder sessions_dir=%s",
            container.transcripts.sessions_dir,
        )
        return SessionListResponse(
            sessions=[_placeholder_dto(row) for row in container.placeholders.sessions],
            placeholder=True,
        )
    return SessionListResponse(sessions=[_summary_dto(item) for item in summaries])


@router.get("/{session_id}", response_model=SessionDetailDto)
def get_session(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> SessionDetailDto:
    try:
        detail = container.transcripts.read_session(session_id)
    except MissionControlError as exc:
        raise to_http_error(exc) from exc
    return _detail_dto(detail)
