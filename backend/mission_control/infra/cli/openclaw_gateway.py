"""CLI infra: run the external `openclaw` binary for session and cron lifecycle commands."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass

from mission_control.core.errors import CliUnavailableError
from mission_control.infra.observability.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OpenClawConfig:
    binary: str = "openclaw"
    timeout_seconds: float = 10.0
    run_timeout_seconds: float = 60.0
    spawn_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class CronJob:
    cron_id: str
    name: str
    schedule: str
    status: str


def parse_cron_table(output: str) -> list[CronJob]:
    """Parse the pipe-delimited `cron list` table; the first two rows are header and rule."""
    rows = [line for line in output.splitlines() if "|" in line]
    jobs: list[CronJob] = []
    for line in rows[2:]:
        parts = [part.strip() for part in line.split("|")]
        parts += [""] * (4 - len(parts))
        if not parts[0]:
            continue
        jobs.append(CronJob(cron_id=parts[0], name=parts[1], schedule=parts[2], status=parts[3]))
    return jobs


class OpenClawGateway:
    """Thin subprocess wrapper; arguments are passed as a list and never through a shell."""

    def __init__(self, config: OpenClawConfig) -> None:
        self._config = config

    @property
    def available(self) -> bool:
        return shutil.which(self._config.binary) is not None

    def _run(self, args: list[str], *, timeout: float) -> str:
        command = [self._config.binary, *args]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=True,
            )
        except FileNotFoundError as exc:
            raise CliUnavailableError(f"{self._config.binary} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise CliUnavailableError(f"{' '.join(args[:2])} timed out after {timeout:g}s") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            raise CliUnavailableError(
                f"{' '.join(args[:2])} exited with {exc.returncode}: {detail[:200]}"
            ) from exc
        return completed.stdout

    def list_crons(self) -> list[CronJob]:
        output = self._run(["cron", "list", "--include-disabled"], timeout=self._config.timeout_seconds)
        return parse_cron_table(output)

    def run_cron(self, cron_id: str) -> str:
        logger.info("cli.cron.run cron_id=%s", cron_id)
        return self._run(["cron", "run", cron_id], timeout=self._config.run_timeout_seconds)

    def spawn_agent(self, task: str, model: str) -> str:
        logger.info("cli.sessions.spawn model=%s task=%s", model, " ".join(task.split())[:160])
        return self._run(
            ["sessions", "spawn", "--task", task, "--model", model],
            timeout=self._config.spawn_timeout_seconds,
        )

    def kill_agent(self, session_id: str) -> str:
        logger.info("cli.sessions.close session_id=%s", session_id)
        return self._run(["sessions", "close", session_id], timeout=self._config.timeout_seconds)
