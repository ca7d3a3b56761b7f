from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from split_audio.core.domain.file_state_machine import ABORTED, DONE, SKIPPED

# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class FileOutcome:
    """Result of processing one input file; filled in as the file advances."""

    source: Path
    state: str | None = None
    start_time: datetime | None = None
    prefix: str | None = None
    produced: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    overwritten: int = 0
    detail: str = ""

    @property
    def segment_count(self) -> int:
        return len(self.produced)


@dataclass(frozen=True, slots=True)
class RunSummary:
    input_dir: Path
    output_folder: Path
    file_count: int
    processed: int
    skipped: int
    aborted: int
    segments_created: int
    outcomes: List[FileOutcome]
    warnings: List[str]


# ---------------------------------------------------------------------------
# Summary builder
# ---------------------------------------------------------------------------

def summarize_run(
    *,
    outcomes: list[FileOutcome],
    input_dir: Path,
    output_folder: Path,
) -> RunSummary:
    warnings: list[str] = []

    if not outcomes:
        warnings.append("No supported audio files found")

    for outcome in outcomes:
        name = outcome.source.name

        if outcome.state == DONE and outcome.segment_count == 0 and not outcome.failed:
            warnings.append(f"{name}: splitter produced no segments")

        if outcome.failed:
            warnings.append(
                f"{name}: {len(outcome.failed)} segment(s) could not be moved"
            )

        if outcome.overwritten:
            warnings.append(
                f"{name}: {outcome.overwritten} existing output file(s) replaced"
            )

    return RunSummary(
        input_dir=input_dir,
        output_folder=output_folder,
        file_count=len(outcomes),
        processed=sum(1 for o in outcomes if o.state == DONE),
        skipped=sum(1 for o in outcomes if o.state == SKIPPED),
        aborted=sum(1 for o in outcomes if o.state == ABORTED),
        segments_created=sum(o.segment_count for o in outcomes),
        outcomes=outcomes,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def print_run_summary(summary: RunSummary) -> None:
    print(f"Input folder: {summary.input_dir}")
    print(f"Output folder: {summary.output_folder}")
    print(f"Files: {summary.file_count}")
    print(f"Processed: {summary.processed}")
    print(f"Skipped: {summary.skipped}")
    print(f"Aborted: {summary.aborted}")
    print(f"Segments created: {summary.segments_created}")
    print()

    if summary.warnings:
        print("Warnings:")
        for w in summary.warnings:
            print(f"  - {w}")
        print()

    if not summary.outcomes:
        return

    print("Files:")
    for o in summary.outcomes:
        line = f"  - {o.source.name}: {o.state} | {o.segment_count} segments"
        if o.detail:
            line += f" | {o.detail}"
        print(line)
