"""HTTP API layer: cron listing, manual runs and run history."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, Query

from mission_control.api.deps import get_container, to_http_error
from mission_control.core.container import AppContainer
from mission_control.core.errors import CliUnavailableError, InvalidSessionIdError
from mission_control.infra.cli.openclaw_gateway import CronJob
from mission_control.infra.observability.logger import get_logger
from mission_control.infra.store.cron_history import CronRunRecord
from mission_control.infra.store.transcript_store import validate_session_id
from mission_control.protocol.messages import (
    CronHistoryResponse,
    CronJobDto,
    CronListResponse,
    CronRunRecordDto,
    CronRunResponse,
)

router = APIRouter(prefix="/api/crons", tags=["crons"])
logger = get_logger(__name__)


def _cron_dto(job: CronJob) -> CronJobDto:
    return CronJobDto(id=job.cron_id, name=job.name, schedule=job.schedule, status=job.status)


def _cron_name(container: AppContainer, cron_id: str) -> str:
    for job in container.placeholders.crons:
        if job.cron_id == cron_id:
            return job.name
    return cron_id


@router.get("", response_model=CronListResponse)
def list_crons(container: AppContainer = Depends(get_container)) -> CronListResponse:
    try:
        jobs = container.gateway.list_crons()
    except CliUnavailableError as exc:
        logger.warning("api.crons.placeholder error=%s", exc)
        return CronListResponse(
            crons=[_cron_dto(job) for job in container.placeholders.crons],
            placeholder=True,
        )
    return CronListResponse(crons=[_cron_dto(job) for job in jobs])


@router.get("/history", response_model=CronHistoryResponse)
def cron_history(
    limit: int = Query(default=50, ge=1, le=500),
    container: AppContainer = Depends(get_container),
) -> CronHistoryResponse:
    records = container.cron_history.get(limit=limit)
    return CronHistoryResponse(
        history=[
            CronRunRecordDto(
                cron_id=record.cron_id,
                name=record.name,
                timestamp=record.timestamp,
                duration_ms=record.duration_ms,
                status=record.status,
                output_preview=record.output_preview,
            )
            for record in records
        ]
    )


@router.post("/{cron_id}/run", response_model=CronRunResponse)
def run_cron(
    cron_id: str,
    container: AppContainer = Depends(get_container),
) -> CronRunResponse:
    try:
        validate_session_id(cron_id)
    except InvalidSessionIdError as exc:
        raise to_http_error(exc) from exc

    name = _cron_name(container, cron_id)
    started = time.monotonic()
    try:
        output = container.gateway.run_cron(cron_id)
    except CliUnavailableError as exc:
        container.cron_history.append(
            CronRunRecord(
                cron_id=cron_id,
                name=name,
                status="failed",
                duration_ms=int((time.monotonic() - started) * 1000),
                output_preview=str(exc)[:200],
            )
        )
        logger.error("api.crons.run.failed cron_id=%s error=%s", cron_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    container.cron_history.append(
        CronRunRecord(
            cron_id=cron_id,
            name=name,
            status="success",
            duration_ms=int((time.monotonic() - started) * 1000),
            output_preview=" ".join(output.split())[:200],
        )
    )
    return CronRunResponse(success=True, message=f"Cron {cron_id} triggered", output=output)
