"""ffmpeg-backed Splitter implementation."""

from __future__ import annotations

import logging
import shutil
import subprocess
from datetime import timedelta
from pathlib import Path

from split_audio.core.domain.errors import ConfigurationError, ExternalToolError

LOGGER = logging.getLogger(__name__)

# Five digits keep lexicographic order equal to sequence order up to
# 99999 segments per input file.
SEGMENT_TEMPLATE = "part_%05d"

STDERR_TAIL_CHARS = 2000


class FfmpegSplitter:
    """
    Cuts an input file with ffmpeg's segment muxer, stream copy only.

    One split() call == one blocking ffmpeg process.
    """

    def __init__(self, executable: str) -> None:
        self._executable = executable

    @classmethod
    def resolve(cls, ffmpeg_path: str) -> FfmpegSplitter:
        """Locate the ffmpeg executable or fail with ConfigurationError."""
        executable = shutil.which(ffmpeg_path)
        if executable is None:
            raise ConfigurationError(f"ffmpeg executable not found: {ffmpeg_path!r}")
        return cls(executable)

    @property
    def executable(self) -> str:
        return self._executable

    def build_command(
        self,
        input_file: Path,
        segment_duration: timedelta,
        output_dir: Path,
        output_extension: str,
    ) -> list[str]:
        segment_seconds = int(segment_duration.total_seconds())
        return [
            self._executable,
            "-hide_banner",
            "-loglevel", "error",
            "-nostdin",
            "-i", str(input_file),
            "-f", "segment",
            "-segment_time", str(segment_seconds),
            "-c", "copy",
            str(output_dir / f"{SEGMENT_TEMPLATE}.{output_extension}"),
        ]

    def split(
        self,
        input_file: Path,
        segment_duration: timedelta,
        output_dir: Path,
        output_extension: str,
    ) -> None:
        command = self.build_command(
            input_file,
            segment_duration,
            output_dir,
            output_extension,
        )
        LOGGER.debug("running %s", command)

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise ExternalToolError(
                f"failed to launch {self._executable}: {exc}"
            ) from exc
        except UnicodeError as exc:
            raise ExternalToolError(
                f"unreadable output from {self._executable}: {exc}"
            ) from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "")[-STDERR_TAIL_CHARS:]
            raise ExternalToolError(
                f"ffmpeg exited with code {completed.returncode} "
                f"for {input_file.name}",
                returncode=completed.returncode,
                stderr=stderr,
            )
