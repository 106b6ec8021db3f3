"""Test fixtures shared by unit/integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def sessions_dir(tmp_path: Path) -> Path:
    """Empty workspace directory for transcripts."""
    path = tmp_path / "sessions"
    path.mkdir()
    return path
