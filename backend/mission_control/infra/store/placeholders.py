"""Data layer: fallback sessions/crons shown when the workspace or CLI is unavailable."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, get_args

import yaml

from mission_control.infra.cli.openclaw_gateway import CronJob
from mission_control.infra.observability.logger import get_logger
from mission_control.infra.store.transcript_store import SessionStatus, SessionType

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlaceholderSession:
    session_id: str
    name: str
    type: SessionType = "main"
    status: SessionStatus = "idle"
    last_activity: str = "unknown"


_BUILTIN_SESSIONS = (PlaceholderSession(session_id="main", name="Main Session", status="active"),)
_SESSION_TYPES = frozenset(get_args(SessionType))
_SESSION_STATUSES = frozenset(get_args(SessionStatus))


def _choice(item: dict[str, Any], key: str, allowed: frozenset[str], default: str) -> Any:
    value = item.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str) or value not in allowed:
        logger.warning("placeholders.invalid_value id=%s %s=%r default=%s", item.get("id"), key, value, default)
        return default
    return value


class PlaceholderCatalog:
    """Load placeholder rows from YAML; the session list is never empty."""

    def __init__(self, *, sessions: list[PlaceholderSession], crons: list[CronJob]) -> None:
        self._sessions = sessions or list(_BUILTIN_SESSIONS)
        self._crons = crons

    @classmethod
    def from_yaml(cls, path: Path) -> "PlaceholderCatalog":
        raw = cls._load(path)
        sessions = [
            PlaceholderSession(
                session_id=str(item["id"]),
                name=str(item.get("name") or item["id"]),
                type=_choice(item, "type", _SESSION_TYPES, "main"),
                status=_choice(item, "status", _SESSION_STATUSES, "idle"),
                last_activity=str(item.get("last_activity") or "unknown"),
            )
            for item in raw.get("sessions") or []
            if isinstance(item, dict) and item.get("id")
        ]
        crons = [
            CronJob(
                cron_id=str(item["id"]),
                name=str(item.get("name") or ""),
                schedule=str(item.get("schedule") or ""),
                status=str(item.get("status") or ""),
            )
            for item in raw.get("crons") or []
            if isinstance(item, dict) and item.get("id")
        ]
        return cls(sessions=sessions, crons=crons)

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        if not path.exists():
            logger.warning("placeholders.missing path=%s", path)
            return {}
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            logger.warning("placeholders.invalid path=%s error=%s", path, exc)
            return {}
        return raw if isinstance(raw, dict) else {}

    @property
    def sessions(self) -> list[PlaceholderSession]:
        return list(self._sessions)

    @property
    def crons(self) -> list[CronJob]:
        return list(self._crons)
