"""
Diagnostic event models.

These events are immutable facts observed while processing a run. They are
consumed by the logging sink and, when enabled, the log file recorder.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RunStartedEvent:
    input_dir: str
    output_folder: str
    pattern: str
    segment_duration_seconds: int
    candidate_count: int


@dataclass(slots=True)
class RunFinishedEvent:
    processed: int
    skipped: int
    aborted: int
    segments_created: int


@dataclass(slots=True)
class FileStateTransitionEvent:
    source: str
    prev_state: str | None
    next_state: str


@dataclass(slots=True)
class FileSkippedEvent:
    source: str
    reason: str
    detail: str


@dataclass(slots=True)
class FileAbortedEvent:
    source: str
    stage: str
    error: str


@dataclass(slots=True)
class SegmentCreatedEvent:
    source: str
    index: int
    final_name: str
    timestamp: str
    overwritten: bool


@dataclass(slots=True)
class SegmentRelocationFailedEvent:
    source: str
    index: int
    final_name: str
    error: str
