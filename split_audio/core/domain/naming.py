"""
Segment naming.

Turns the ordered, anonymous output of the splitter into timestamped
names. Segment ``k`` starts at ``start_time + k * segment_duration``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Sequence

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
    {
        "wav",
        "mp3",
        "flac",
        "ogg",
        "aac",
        "m4a",
    }
)


@dataclass(frozen=True, slots=True)
class SegmentAssignment:
    index: int
    source: Path
    timestamp: datetime
    final_name: str


def has_supported_extension(path: Path) -> bool:
    return path.suffix[1:].lower() in SUPPORTED_EXTENSIONS


def format_timestamp(ts: datetime) -> str:
    """Render ``ts`` as YYYYMMDDHHMMSS with a zero-padded year."""
    return (
        f"{ts.year:04d}{ts.month:02d}{ts.day:02d}"
        f"{ts.hour:02d}{ts.minute:02d}{ts.second:02d}"
    )


def order_segments(paths: Iterable[Path]) -> list[Path]:
    """
    Keep splitter output with a supported extension, in ascending
    lexicographic order of file name.

    The splitter writes zero-padded sequence numbers, so name order is
    sequence order. Index position drives the timestamp offset.
    """
    return sorted(
        (p for p in paths if has_supported_extension(p)),
        key=lambda p: p.name,
    )


def assign_names(
    segments: Sequence[Path],
    start_time: datetime,
    prefix: str,
    segment_duration: timedelta,
) -> list[SegmentAssignment]:
    """
    Compute the final name of every segment.

    Pure: depends only on the index, the inputs and each segment's
    extension. The extension keeps its original case.

    Stops at the first segment whose timestamp falls past the end of the
    calendar; every later one would too. The caller sees fewer
    assignments than segments.
    """
    assignments: list[SegmentAssignment] = []

    for index, source in enumerate(segments):
        try:
            timestamp = start_time + index * segment_duration
        except OverflowError:
            break
        name = prefix + format_timestamp(timestamp)
        if source.suffix:
            name += source.suffix

        assignments.append(
            SegmentAssignment(
                index=index,
                source=source,
                timestamp=timestamp,
                final_name=name,
            )
        )

    return assignments
