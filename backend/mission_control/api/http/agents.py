"""HTTP API layer: spawn and kill agent sessions through the external CLI."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException

from mission_control.api.deps import get_container, to_http_error
from mission_control.core.container import AppContainer
from mission_control.core.errors import CliUnavailableError, InvalidSessionIdError
from mission_control.infra.observability.logger import get_logger
from mission_control.infra.store.transcript_store import validate_session_id
from mission_control.protocol.messages import AgentActionResponse, SpawnAgentRequest

router = APIRouter(prefix="/api/agents", tags=["agents"])
logger = get_logger(__name__)


@router.post("/spawn", response_model=AgentActionResponse)
def spawn_agent(
    request: SpawnAgentRequest,
    container: AppContainer = Depends(get_container),
) -> AgentActionResponse:
    task = (request.task or "").strip()
    if not task:
        raise HTTPException(status_code=400, detail="Task is required")
    model = request.model or container.settings.default_agent_model

    try:
        output = container.gateway.spawn_agent(task, model)
    except CliUnavailableError as exc:
        logger.warning("api.agents.spawn.simulated error=%s", exc)
        return AgentActionResponse(
            success=True,
            message=f"Agent created for: {task}",
            task=task,
            agent_id=f"agent-{int(time.time() * 1000)}",
            simulated=True,
        )
    return AgentActionResponse(success=True, message="Agent spawned", task=task, output=output)


@router.post("/{session_id}/kill", response_model=AgentActionResponse)
def kill_agent(
    session_id: str,
    container: AppContainer = Depends(get_container),
) -> AgentActionResponse:
    try:
        validate_session_id(session_id)
    except InvalidSessionIdError as exc:
        raise to_http_error(exc) from exc

    try:
        container.gateway.kill_agent(session_id)
    except CliUnavailableError as exc:
        logger.warning("api.agents.kill.simulated session_id=%s error=%s", session_id, exc)
        return AgentActionResponse(
            success=True,
            message=f"Agent {session_id} stopped (simulated)",
            simulated=True,
        )
    return AgentActionResponse(success=True, message=f"Agent {session_id} stopped")
