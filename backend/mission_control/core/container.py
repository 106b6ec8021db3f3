"""Composition layer: build and hold long-lived service objects for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass

from mission_control.core.config import Settings
from mission_control.infra.cli.openclaw_gateway import OpenClawConfig, OpenClawGateway
from mission_control.infra.store.cron_history import CronHistoryStore
from mission_control.infra.store.placeholders import PlaceholderCatalog
from mission_control.infra.store.transcript_store import TranscriptStore


@dataclass
class AppContainer:
    """Container object attached to FastAPI app state."""

    settings: Settings
    transcripts: TranscriptStore
    gateway: OpenClawGateway
    cron_history: CronHistoryStore
    placeholders: PlaceholderCatalog


def build_container(settings: Settings) -> AppContainer:
    """Construct runtime dependencies in one place."""
    transcripts = TranscriptStore(
        settings.sessions_dir,
        active_minutes=settings.session_active_minutes,
        log_limit=settings.log_entry_limit,
        text_limit=settings.log_text_limit,
    )
    gateway = OpenClawGateway(
        OpenClawConfig(
            binary=settings.openclaw_bin,
            timeout_seconds=settings.cli_timeout_seconds,
            run_timeout_seconds=settings.cli_run_timeout_seconds,
            spawn_timeout_seconds=settings.cli_spawn_timeout_seconds,
        )
    )
    return AppContainer(
        settings=settings,
        transcripts=transcripts,
        gateway=gateway,
        cron_history=CronHistoryStore(max_records=settings.cron_history_size),
        placeholders=PlaceholderCatalog.from_yaml(settings.placeholders_file),
    )
