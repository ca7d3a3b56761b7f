"""Public API for the split_audio package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from split_audio.core.config.settings import SplitSettings, load_settings

# ----------------------------------------------------------------------
# Domain API (template matching and segment naming)
# ----------------------------------------------------------------------
from split_audio.core.domain.errors import (
    ConfigurationError,
    ExternalToolError,
    MatchError,
    MatchFailure,
    RelocationError,
    SplitAudioError,
)
from split_audio.core.domain.naming import (
    SUPPORTED_EXTENSIONS,
    SegmentAssignment,
    assign_names,
    format_timestamp,
)
from split_audio.core.domain.template import (
    CompiledTemplate,
    MatchResult,
    compile_template,
    match_filename,
)

# ----------------------------------------------------------------------
# Splitter interface and pipeline
# ----------------------------------------------------------------------
from split_audio.core.ports.splitter import Splitter
from split_audio.runtime.pipeline import SplitPipeline, discover_audio_files
from split_audio.runtime.summary import FileOutcome, RunSummary
from split_audio.splitting.ffmpeg_splitter import FfmpegSplitter

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Config
    "SplitSettings",
    "load_settings",

    # Errors
    "SplitAudioError",
    "ConfigurationError",
    "MatchError",
    "MatchFailure",
    "ExternalToolError",
    "RelocationError",

    # Template matching
    "CompiledTemplate",
    "MatchResult",
    "compile_template",
    "match_filename",

    # Naming
    "SUPPORTED_EXTENSIONS",
    "SegmentAssignment",
    "assign_names",
    "format_timestamp",

    # Pipeline
    "Splitter",
    "FfmpegSplitter",
    "SplitPipeline",
    "discover_audio_files",
    "FileOutcome",
    "RunSummary",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("split-audio")
except PackageNotFoundError:
    __version__ = "0.0.0"
