"""Error taxonomy for the split pipeline.

Configuration errors are fatal and abort the run before any file is
processed. Match and external tool errors are scoped to one input file,
relocation errors to one segment; the orchestrator records and swallows
them at that granularity.
"""

from __future__ import annotations

from pathlib import Path


class MatchFailure:
    """Reason codes attached to MatchError."""

    TOO_SHORT = "too_short"
    NOT_NUMERIC = "not_numeric"
    INVALID_DATETIME = "invalid_datetime"


class SplitAudioError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(SplitAudioError):
    """Missing or semantically invalid settings."""


class MatchError(SplitAudioError):
    """A filename does not fit the configured template."""

    def __init__(self, filename: str, reason: str, detail: str = "") -> None:
        self.filename = filename
        self.reason = reason
        self.detail = detail
        message = f"{filename!r} does not match template ({reason})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ExternalToolError(SplitAudioError):
    """The external splitter failed to launch or exited abnormally."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class RelocationError(SplitAudioError):
    """Moving a transient segment to its final name failed."""

    def __init__(self, source: Path, destination: Path, cause: OSError) -> None:
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"cannot move {source.name} to {destination}: {cause}")
