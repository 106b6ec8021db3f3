"""Configuration layer: load runtime settings from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_PACKAGE_ROOT = Path(__file__).resolve().parents[1]


def _resolve_path(path_like: str) -> Path:
    candidate = Path(path_like).expanduser()
    if candidate.is_absolute():
        return candidate
    if candidate.exists():
        return candidate
    rooted = _PACKAGE_ROOT / candidate
    if rooted.exists():
        return rooted
    return candidate


@dataclass(frozen=True)
class Settings:
    """Immutable application settings used across API/stream layers."""

    app_name: str = "Mission Control API"
    app_version: str = "1.0.0"
    env: str = "dev"
    log_level: str = "INFO"
    transcript_log_level: str | None = None
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: str = "*"
    sessions_dir: Path = Path("~/.openclaw/agents/main/sessions")
    session_list_limit: int = 20
    session_active_minutes: int = 60
    log_entry_limit: int = 50
    log_text_limit: int = 200
    tail_poll_seconds: float = 0.5
    sse_keepalive_seconds: float = 15.0
    openclaw_bin: str = "openclaw"
    cli_timeout_seconds: float = 10.0
    cli_run_timeout_seconds: float = 60.0
    cli_spawn_timeout_seconds: float = 30.0
    cron_history_size: int = 100
    default_agent_model: str = "kimi"
    placeholders_file: Path = _PACKAGE_ROOT / "resources" / "placeholders.yaml"

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from process env with deterministic defaults."""
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            app_version=os.getenv("APP_VERSION", cls.app_version),
            env=os.getenv("APP_ENV", cls.env),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            transcript_log_level=os.getenv("TRANSCRIPT_LOG_LEVEL") or None,
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", str(cls.port))),
            cors_allow_origins=os.getenv("CORS_ALLOW_ORIGINS", cls.cors_allow_origins),
            sessions_dir=Path(os.getenv("SESSIONS_DIR", str(cls.sessions_dir))).expanduser(),
            session_list_limit=int(
                os.getenv("SESSION_LIST_LIMIT", str(cls.session_list_limit))
            ),
            session_active_minutes=int(
                os.getenv("SESSION_ACTIVE_MINUTES", str(cls.session_active_minutes))
            ),
            log_entry_limit=int(os.getenv("LOG_ENTRY_LIMIT", str(cls.log_entry_limit))),
            log_text_limit=int(os.getenv("LOG_TEXT_LIMIT", str(cls.log_text_limit))),
            tail_poll_seconds=float(
                os.getenv("TAIL_POLL_SECONDS", str(cls.tail_poll_seconds))
            ),
            sse_keepalive_seconds=float(
                os.getenv("SSE_KEEPALIVE_SECONDS", str(cls.sse_keepalive_seconds))
            ),
            openclaw_bin=os.getenv("OPENCLAW_BIN", cls.openclaw_bin),
            cli_timeout_seconds=float(
                os.getenv("CLI_TIMEOUT_SECONDS", str(cls.cli_timeout_seconds))
            ),
            cli_run_timeout_seconds=float(
                os.getenv("CLI_RUN_TIMEOUT_SECONDS", str(cls.cli_run_timeout_seconds))
            ),
            cli_spawn_timeout_seconds=float(
                os.getenv("CLI_SPAWN_TIMEOUT_SECONDS", str(cls.cli_spawn_timeout_seconds))
            ),
            cron_history_size=int(
                os.getenv("CRON_HISTORY_SIZE", str(cls.cron_history_size))
            ),
            default_agent_model=os.getenv("DEFAULT_AGENT_MODEL", cls.default_agent_model),
            placeholders_file=_resolve_path(
                os.getenv("PLACEHOLDERS_FILE", str(cls.placeholders_file))
            ),
        )
