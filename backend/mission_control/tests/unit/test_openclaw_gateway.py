"""Unit tests for CLI command construction, failure mapping and cron table parsing."""

from __future__ import annotations

import subprocess

import pytest

from mission_control.core.errors import CliUnavailableError
from mission_control.infra.cli import openclaw_gateway
from mission_control.infra.cli.openclaw_gateway import (
    CronJob,
    OpenClawConfig,
    OpenClawGateway,
    parse_cron_table,
)

CRON_TABLE = """\
ID       | Name             | Schedule | Status
---------|------------------|----------|---------
bb0fb60e | Morning Briefing | 7:30 AM  | enabled
18e381cb | Evening Prep     | 8:00 PM  | disabled
         | orphan row       |          |
"""


def test_parse_cron_table_skips_header_and_empty_ids() -> None:
    assert parse_cron_table(CRON_TABLE) == [
        CronJob(cron_id="bb0fb60e", name="Morning Briefing", schedule="7:30 AM", status="enabled"),
        CronJob(cron_id="18e381cb", name="Evening Prep", schedule="8:00 PM", status="disabled"),
    ]
    assert parse_cron_table("no crons configured\n") == []


def test_commands_are_passed_as_argument_lists(monkeypatch) -> None:
    calls: list[tuple[list[str], float]] = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs["timeout"]))
        assert "shell" not in kwargs
        return subprocess.CompletedProcess(command, 0, stdout=CRON_TABLE, stderr="")

    monkeypatch.setattr(openclaw_gateway.subprocess, "run", fake_run)
    gateway = OpenClawGateway(
        OpenClawConfig(binary="oc", timeout_seconds=1, run_timeout_seconds=2, spawn_timeout_seconds=3)
    )

    assert len(gateway.list_crons()) == 2
    gateway.run_cron("bb0fb60e")
    gateway.spawn_agent('say "hi"; rm -rf /', "kimi")
    gateway.kill_agent("subagent-1")

    assert calls == [
        (["oc", "cron", "list", "--include-disabled"], 1),
        (["oc", "cron", "run", "bb0fb60e"], 2),
        (["oc", "sessions", "spawn", "--task", 'say "hi"; rm -rf /', "--model", "kimi"], 3),
        (["oc", "sessions", "close", "subagent-1"], 1),
    ]


def test_missing_binary_raises_cli_unavailable() -> None:
    gateway = OpenClawGateway(OpenClawConfig(binary="openclaw-missing-for-tests"))

    assert gateway.available is False
    with pytest.raises(CliUnavailableError, match="not found"):
        gateway.list_crons()


@pytest.mark.parametrize(
    "error",
    [
        subprocess.TimeoutExpired(cmd=["oc"], timeout=1),
        subprocess.CalledProcessError(returncode=2, cmd=["oc"], stderr="gateway offline"),
    ],
)
def test_timeouts_and_failures_raise_cli_unavailable(monkeypatch, error) -> None:
    def fake_run(command, **kwargs):
        raise error

    monkeypatch.setattr(openclaw_gateway.subprocess, "run", fake_run)
    gateway = OpenClawGateway(OpenClawConfig(binary="oc"))

    with pytest.raises(CliUnavailableError):
        gateway.run_cron("bb0fb60e")
