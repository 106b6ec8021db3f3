"""Protocol layer: request/response DTOs shared by the HTTP and stream routers."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


SessionType = Literal["cron", "subagent", "main"]
SessionStatus = Literal["active", "idle"]
LogKind = Literal["text", "think", "tool", "error"]


class SessionSummaryDto(BaseModel):
    """One row of the session list, newest-first."""

    id: str
    display_id: str
    name: str
    type: SessionType
    status: SessionStatus
    last_activity: str
    size: str
    updated_at: str | None = None


class SessionListResponse(BaseModel):
    sessions: list[SessionSummaryDto]
    placeholder: bool = False


class TraceStepDto(BaseModel):
    index: int
    label: Literal["LLM Response", "Tool Execution"]
    status: Literal["running", "success"]
    timestamp: str | None = None


class LogEntryDto(BaseModel):
    timestamp: str | None = None
    type: LogKind
    text: str


class SessionDetailDto(BaseModel):
    """Parsed transcript view: trace is in arrival order, logs newest-first."""

    id: str
    name: str
    type: SessionType
    status: SessionStatus
    tokens: str
    total_tokens: int = 0
    model: str | None = None
    duration: str | None = None
    event_count: int = 0
    logs: list[LogEntryDto] = Field(default_factory=list)
    trace: list[TraceStepDto] = Field(default_factory=list)


class CronJobDto(BaseModel):
    id: str
    name: str
    schedule: str
    status: str


class CronListResponse(BaseModel):
    crons: list[CronJobDto]
    placeholder: bool = False


class CronRunResponse(BaseModel):
    success: bool
    message: str
    output: str | None = None


class CronRunRecordDto(BaseModel):
    cron_id: str
    name: str
    timestamp: str
    duration_ms: int
    status: Literal["success", "failed"]
    output_preview: str = ""


class CronHistoryResponse(BaseModel):
    history: list[CronRunRecordDto]


class SpawnAgentRequest(BaseModel):
    task: str | None = None
    model: str | None = None


class AgentActionResponse(BaseModel):
    success: bool
    message: str
    task: str | None = None
    agent_id: str | None = None
    output: str | None = None
    simulated: bool = False


class ComponentStatusDto(BaseModel):
    status: str
    detail: str | None = None


class SystemStatusResponse(BaseModel):
    timestamp: str
    api: ComponentStatusDto
    workspace: ComponentStatusDto
    gateway: ComponentStatusDto
