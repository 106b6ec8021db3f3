"""HTTP API layer: health and component status endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from mission_control.api.deps import get_container
from mission_control.core.container import AppContainer
from mission_control.protocol.messages import ComponentStatusDto, SystemStatusResponse

router = APIRouter(prefix="/api", tags=["health"])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health(container: AppContainer = Depends(get_container)) -> dict:
    return {
        "status": "ok",
        "timestamp": _now_iso(),
        "env": container.settings.env,
        "workspace": container.transcripts.health(),
    }


@router.get("/status", response_model=SystemStatusResponse)
def system_status(container: AppContainer = Depends(get_container)) -> SystemStatusResponse:
    workspace = container.transcripts.health()
    gateway_ok = container.gateway.available
    return SystemStatusResponse(
        timestamp=_now_iso(),
        api=ComponentStatusDto(status="connected", detail=container.settings.app_version),
        workspace=ComponentStatusDto(
            status="healthy" if workspace["available"] else "degraded",
            detail=str(workspace["sessions_dir"]),
        ),
        gateway=ComponentStatusDto(
            status="healthy" if gateway_ok else "unavailable",
            detail=container.settings.openclaw_bin,
        ),
    )
