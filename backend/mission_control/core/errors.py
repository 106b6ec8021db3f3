"""Typed errors raised by transcript, tail and CLI layers and mapped by the API layer."""

from __future__ import annotations


class MissionControlError(RuntimeError):
    """Base class for recoverable service errors."""


class InvalidSessionIdError(MissionControlError):
    """Raised before any I/O when an identifier falls outside the allowed charset."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"invalid identifier: {session_id!r}")
        self.session_id = session_id


class TranscriptNotFoundError(MissionControlError):
    """Raised when the transcript file for a session does not exist."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"session '{session_id}' not found")
        self.session_id = session_id


class CliUnavailableError(MissionControlError):
    """Raised when the external CLI is missing, fails, or times out."""


class TranscriptUnreadableError(MissionControlError):
    """Raised when a transcript exists but the OS refuses to read it."""

    def __init__(self, session_id: str, reason: str) -> None:
        super().__init__(f"session '{session_id}' is unreadable: {reason}")
        self.session_id = session_id
