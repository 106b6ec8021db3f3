"""Unit tests for environment-driven settings and placeholder loading."""

from __future__ import annotations

import logging
from pathlib import Path

from mission_control.core.config import Settings
from mission_control.infra.observability.logger import setup_logging
from mission_control.infra.store.placeholders import PlaceholderCatalog


def test_settings_reads_workspace_tail_and_cli_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SESSIONS_DIR", str(tmp_path))
    monkeypatch.setenv("SESSION_LIST_LIMIT", "5")
    monkeypatch.setenv("SESSION_ACTIVE_MINUTES", "15")
    monkeypatch.setenv("LOG_ENTRY_LIMIT", "10")
    monkeypatch.setenv("LOG_TEXT_LIMIT", "80")
    monkeypatch.setenv("TAIL_POLL_SECONDS", "0.25")
    monkeypatch.setenv("SSE_KEEPALIVE_SECONDS", "5")
    monkeypatch.setenv("OPENCLAW_BIN", "/opt/openclaw/bin/openclaw")
    monkeypatch.setenv("CLI_TIMEOUT_SECONDS", "3")
    monkeypatch.setenv("CLI_RUN_TIMEOUT_SECONDS", "90")
    monkeypatch.setenv("CRON_HISTORY_SIZE", "7")
    monkeypatch.setenv("DEFAULT_AGENT_MODEL", "claude")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings.from_env()

    assert settings.sessions_dir == tmp_path
    assert settings.session_list_limit == 5
    assert settings.session_active_minutes == 15
    assert settings.log_entry_limit == 10
    assert settings.log_text_limit == 80
    assert settings.tail_poll_seconds == 0.25
    assert settings.sse_keepalive_seconds == 5
    assert settings.openclaw_bin == "/opt/openclaw/bin/openclaw"
    assert settings.cli_timeout_seconds == 3
    assert settings.cli_run_timeout_seconds == 90
    assert settings.cron_history_size == 7
    assert settings.default_agent_model == "claude"
    assert settings.port == 9000


def test_default_placeholders_file_is_bundled() -> None:
    catalog = PlaceholderCatalog.from_yaml(Settings().placeholders_file)

    assert [row.session_id for row in catalog.sessions] == ["main", "cron-morning", "cron-evening"]
    assert [job.name for job in catalog.crons] == ["Morning Briefing", "Evening Prep"]


def test_missing_or_broken_placeholders_still_yield_a_session(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("sessions: [unclosed", encoding="utf-8")

    for path in (tmp_path / "absent.yaml", broken):
        catalog = PlaceholderCatalog.from_yaml(path)
        assert catalog.sessions
        assert catalog.crons == []


def test_placeholder_type_and_status_fall_back_to_known_values(tmp_path: Path) -> None:
    path = tmp_path / "placeholders.yaml"
    path.write_text(
        "sessions:\n"
        "  - {id: nightly, type: cron, status: scheduled}\n"
        "  - {id: helper, type: [subagent], status: active}\n"
        "  - {id: plain}\n",
        encoding="utf-8",
    )

    catalog = PlaceholderCatalog.from_yaml(path)

    assert [(row.session_id, row.type, row.status) for row in catalog.sessions] == [
        ("nightly", "cron", "idle"),
        ("helper", "main", "active"),
        ("plain", "main", "idle"),
    ]


def test_transcript_log_level_is_separate_from_root(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("TRANSCRIPT_LOG_LEVEL", "debug")

    settings = Settings.from_env()
    setup_logging(settings.log_level, transcript_level=settings.transcript_log_level)

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
    assert logging.getLogger("mission_control.transcript.tail").isEnabledFor(logging.DEBUG)
    assert not logging.getLogger("mission_control.api.http.sessions").isEnabledFor(logging.INFO)

    setup_logging("INFO")
    assert logging.getLogger("mission_control.infra.store").level == logging.INFO
