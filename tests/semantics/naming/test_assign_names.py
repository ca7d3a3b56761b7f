"""
Semantic test: segment naming.

Invariant:
Segment k of a file is stamped start_time + k * segment_duration and named
prefix + YYYYMMDDHHMMSS + original extension. The computation is pure:
identical inputs give identical names, and stamps grow by exactly one
duration per index.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

from split_audio.core.domain.naming import (
    assign_names,
    format_timestamp,
    has_supported_extension,
    order_segments,
)

START = datetime(2023, 6, 1, 9, 0, 0)
DURATION = timedelta(hours=2, minutes=30)


def _segments(count: int, extension: str = "mp3") -> list[Path]:
    return [Path(f"/tmp/segments/part_{i:05d}.{extension}") for i in range(count)]


def test_three_segments_are_spaced_by_duration() -> None:
    assignments = assign_names(_segments(3), START, "CAM_", DURATION)

    assert [a.final_name for a in assignments] == [
        "CAM_20230601090000.mp3",
        "CAM_20230601113000.mp3",
        "CAM_20230601140000.mp3",
    ]
    assert [a.index for a in assignments] == [0, 1, 2]


def test_assignments_keep_their_source() -> None:
    segments = _segments(2)

    assignments = assign_names(segments, START, "", DURATION)

    assert [a.source for a in assignments] == segments


def test_naming_is_idempotent() -> None:
    segments = _segments(5)

    first = assign_names(segments, START, "XX", DURATION)
    second = assign_names(segments, START, "XX", DURATION)

    assert first == second


def test_stamps_are_strictly_monotonic() -> None:
    assignments = assign_names(_segments(6), START, "XX", DURATION)

    for k1, earlier in enumerate(assignments):
        for later in assignments[k1 + 1:]:
            assert later.timestamp > earlier.timestamp
            assert later.timestamp - earlier.timestamp == (later.index - earlier.index) * DURATION


def test_segments_roll_over_midnight_and_month_end() -> None:
    start = datetime(2023, 12, 31, 22, 0, 0)

    assignments = assign_names(_segments(3), start, "R", DURATION)

    assert [a.final_name for a in assignments] == [
        "R20231231220000.mp3",
        "R20240101003000.mp3",
        "R20240101030000.mp3",
    ]


def test_extension_case_is_preserved() -> None:
    assignments = assign_names([Path("part_00000.WAV")], START, "A", DURATION)

    assert assignments[0].final_name == "A20230601090000.WAV"


def test_segment_without_extension_gets_no_trailing_dot() -> None:
    assignments = assign_names([Path("part_00000")], START, "A", DURATION)

    assert assignments[0].final_name == "A20230601090000"


def test_empty_segment_list_yields_no_assignments() -> None:
    assert assign_names([], START, "A", DURATION) == []


def test_format_timestamp_pads_every_field() -> None:
    assert format_timestamp(datetime(2024, 1, 5, 3, 4, 5)) == "20240105030405"
    assert format_timestamp(datetime(987, 2, 3, 4, 5, 6)) == "09870203040506"


def test_order_segments_sorts_by_name_and_drops_foreign_files() -> None:
    paths = [
        Path("part_00002.flac"),
        Path("part_00000.flac"),
        Path("ffmpeg.log"),
        Path("part_00001.flac"),
    ]

    assert order_segments(paths) == [
        Path("part_00000.flac"),
        Path("part_00001.flac"),
        Path("part_00002.flac"),
    ]


def test_supported_extensions_ignore_case() -> None:
    assert has_supported_extension(Path("a.WAV"))
    assert has_supported_extension(Path("a.m4a"))
    assert not has_supported_extension(Path("a.mp4"))
    assert not has_supported_extension(Path("wav"))


def test_naming_stops_at_first_segment_past_year_9999() -> None:
    start = datetime(9999, 12, 31, 20, 0, 0)

    assignments = assign_names(_segments(4), start, "END", DURATION)

    assert [a.final_name for a in assignments] == [
        "END99991231200000.mp3",
        "END99991231223000.mp3",
    ]
