"""Run settings model.

This module defines the SplitSettings schema and the loader for the
``settings.txt`` file the tool reads from its working directory. Settings
are loaded once at startup and passed explicitly to every component; they
are never mutated during a run.

File format (``#`` starts a comment line, blank lines are ignored):

    pattern=??YYYYMMDDhhmmss
    segment_duration=02:30:00
    output_folder=SOUND
    log_enabled=true
"""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from split_audio.core.domain.errors import ConfigurationError
from split_audio.core.domain.template import CompiledTemplate, compile_template

LOGGER = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("settings.txt")

DEFAULT_SETTINGS_TEXT = """\
# split-audio settings
# pattern: filename template, ? marks an ignored character
# YYYY year, MM month, DD day, hh hours, mm minutes, ss seconds
pattern=??YYYYMMDDhhmmss

# Segment duration as HH:MM:SS
segment_duration=02:30:00

# Folder that receives the renamed segments
output_folder=SOUND

# Append a diagnostic log to script_log.txt: true or false
log_enabled=true
"""

_DURATION_RE = re.compile(
    r"(?:(?P<days>\d+)\.)?(?P<hours>\d+):(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?"
)


def parse_duration(value: str) -> timedelta:
    """Parse ``[D.]HH:MM[:SS]`` into a timedelta."""
    match = _DURATION_RE.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"{value!r} is not a duration of the form HH:MM:SS")

    minutes = int(match["minutes"])
    seconds = int(match["seconds"] or 0)
    if minutes > 59 or seconds > 59:
        raise ValueError(f"{value!r}: minutes and seconds must be below 60")

    return timedelta(
        days=int(match["days"] or 0),
        hours=int(match["hours"]),
        minutes=minutes,
        seconds=seconds,
    )


class SplitSettings(BaseModel):
    """Immutable run configuration."""

    pattern: str = Field(..., min_length=1)
    segment_duration: timedelta
    output_folder: Path
    log_enabled: bool = False

    log_path: Path = Path("script_log.txt")
    ffmpeg_path: str = Field(default="ffmpeg", min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_settings_obj(cls, settings_obj: dict[str, Any]) -> SplitSettings:
        """Create a SplitSettings instance from a parsed settings mapping."""
        return cls.model_validate(settings_obj)

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: str) -> str:
        try:
            compile_template(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("segment_duration", mode="before")
    @classmethod
    def _parse_segment_duration(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return timedelta(seconds=value)
        return value

    @field_validator("segment_duration")
    @classmethod
    def _validate_segment_duration(cls, value: timedelta) -> timedelta:
        if value.microseconds:
            raise ValueError("segment_duration must be a whole number of seconds")
        if value < timedelta(seconds=1):
            raise ValueError("segment_duration must be at least 1 second")
        return value

    @field_validator("output_folder", "log_path", mode="before")
    @classmethod
    def _reject_empty_path(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            raise ValueError("path must not be empty")
        return value

    @property
    def segment_seconds(self) -> int:
        return int(self.segment_duration.total_seconds())

    def compiled_template(self) -> CompiledTemplate:
        return compile_template(self.pattern)


def parse_settings_text(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines into a mapping of the recognized keys.

    Unknown keys and lines without ``=`` are logged and ignored.
    """
    known = set(SplitSettings.model_fields)
    parsed: dict[str, str] = {}

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()

        if not sep:
            LOGGER.warning("settings line %d has no '=': %r", lineno, raw_line)
            continue

        if key not in known:
            LOGGER.warning("settings line %d: unknown key %r ignored", lineno, key)
            continue

        parsed[key] = value.strip()

    return parsed


def write_default_settings(path: Path = DEFAULT_SETTINGS_PATH) -> None:
    """Create a settings file holding the defaults."""
    try:
        path.write_text(DEFAULT_SETTINGS_TEXT, encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot write {path}: {exc}") from exc


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> SplitSettings:
    """Read and validate the settings file.

    Any failure (unreadable file, missing or invalid value) is reported as
    ConfigurationError.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise ConfigurationError(f"cannot read {path}: {exc}") from exc

    try:
        return SplitSettings.from_settings_obj(parse_settings_text(text))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'settings'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigurationError(f"invalid {path}: {problems}") from exc
