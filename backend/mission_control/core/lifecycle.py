"""Lifecycle hooks for startup diagnostics."""

from __future__ import annotations

from mission_control.core.container import AppContainer
from mission_control.infra.observability.logger import get_logger

logger = get_logger(__name__)


def on_startup(container: AppContainer) -> None:
    stats = container.transcripts.health()
    logger.info("Transcript workspace: %s", stats)
    if not container.gateway.available:
        logger.warning(
            "CLI binary %r not on PATH; cron and agent actions will use fallbacks.",
            container.settings.openclaw_bin,
        )


def on_shutdown() -> None:
    logger.info("Mission Control shutdown complete.")
