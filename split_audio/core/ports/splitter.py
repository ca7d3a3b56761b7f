"""Splitter protocol for segment production.

This module defines the boundary between the pipeline and whatever cuts an
input file into fixed-duration pieces. Concrete implementations adapt a
specific tool (an ffmpeg subprocess, a library, a remote service) to this
protocol.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Protocol


class Splitter(Protocol):
    """Blocking segment producer.

    Contract:
    - split() returns only after every segment has been written.
    - Every produced file lives directly in ``output_dir`` and carries
      ``output_extension``.
    - Lexicographic order of the produced file names equals sequence order.
    - Failures raise ExternalToolError.
    """

    def split(
        self,
        input_file: Path,
        segment_duration: timedelta,
        output_dir: Path,
        output_extension: str,
    ) -> None:
        """Cut ``input_file`` into ``segment_duration`` pieces in ``output_dir``."""
