"""Split pipeline orchestration.

Drives every candidate file of a run through its lifecycle:

    discovered -> date_extracted -> splitting -> renaming -> done
    discovered -> skipped                   (filename does not match)
    splitting / renaming -> aborted         (splitter or filesystem failure)

Files are processed one at a time. Each file gets a private transient
folder that is removed once the file reaches a terminal state, whatever
that state is.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from tqdm import tqdm

from split_audio.core.domain.errors import (
    ConfigurationError,
    ExternalToolError,
    MatchError,
    RelocationError,
)
from split_audio.core.domain.file_state_machine import (
    ABORTED,
    DATE_EXTRACTED,
    DISCOVERED,
    DONE,
    RENAMING,
    SKIPPED,
    SPLITTING,
    is_terminal_state,
    is_valid_transition,
)
from split_audio.core.domain.naming import (
    SegmentAssignment,
    assign_names,
    format_timestamp,
    has_supported_extension,
    order_segments,
)
from split_audio.core.events.events import (
    FileAbortedEvent,
    FileSkippedEvent,
    FileStateTransitionEvent,
    RunFinishedEvent,
    RunStartedEvent,
    SegmentCreatedEvent,
    SegmentRelocationFailedEvent,
)
from split_audio.runtime.summary import FileOutcome, RunSummary, summarize_run

if TYPE_CHECKING:
    from split_audio.core.config.settings import SplitSettings
    from split_audio.core.domain.template import MatchResult
    from split_audio.core.events.event_bus import EventBus
    from split_audio.core.ports.splitter import Splitter

LOGGER = logging.getLogger(__name__)


def discover_audio_files(directory: Path) -> list[Path]:
    """Return the supported audio files directly inside ``directory``, by name."""
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and has_supported_extension(p)),
        key=lambda p: p.name,
    )


def relocate_segment(source: Path, destination: Path) -> bool:
    """
    Move ``source`` to ``destination``, replacing an existing file.

    The destination is swapped in a single ``os.replace``, so a failure
    leaves any previous output intact. Across devices the segment is first
    copied beside the destination under a staging name.

    Returns True when an existing destination was replaced (last write
    wins). Raises RelocationError on any filesystem failure.
    """
    overwritten = destination.exists()

    try:
        try:
            os.replace(source, destination)
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            _replace_across_devices(source, destination)
    except OSError as exc:
        raise RelocationError(source, destination, exc) from exc

    if overwritten:
        LOGGER.warning("replaced existing output %s", destination)

    return overwritten


def _replace_across_devices(source: Path, destination: Path) -> None:
    staging = destination.with_name(f".{destination.name}.partial")

    try:
        shutil.copy2(source, staging)
        os.replace(staging, destination)
    except OSError:
        staging.unlink(missing_ok=True)
        raise

    source.unlink()


class SplitPipeline:
    """
    Sequential split-and-rename pipeline.

    One pipeline instance == one run over one input folder.
    """

    def __init__(
        self,
        *,
        settings: SplitSettings,
        splitter: Splitter,
        event_bus: EventBus,
        temp_root: Path | None = None,
        show_progress: bool = False,
    ) -> None:
        self._settings = settings
        self._splitter = splitter
        self._event_bus = event_bus
        self._matcher = settings.compiled_template()
        self._temp_root = temp_root
        self._show_progress = show_progress

    def output_folder_for(self, input_dir: Path) -> Path:
        """Relative output folders are resolved against the input folder."""
        return input_dir / self._settings.output_folder

    def run(self, input_dir: Path) -> RunSummary:
        output_folder = self.output_folder_for(input_dir)

        try:
            output_folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                f"cannot create output folder {output_folder}: {exc}"
            ) from exc

        candidates = discover_audio_files(input_dir)

        self._event_bus.emit(
            RunStartedEvent(
                input_dir=str(input_dir),
                output_folder=str(output_folder),
                pattern=self._settings.pattern,
                segment_duration_seconds=self._settings.segment_seconds,
                candidate_count=len(candidates),
            )
        )

        outcomes: list[FileOutcome] = []
        for path in candidates:
            outcome = self.process_file(path, output_folder)
            if not is_terminal_state(outcome.state):
                LOGGER.warning(
                    "%s left in non-terminal state %s",
                    path.name,
                    outcome.state,
                )
            outcomes.append(outcome)

        summary = summarize_run(
            outcomes=outcomes,
            input_dir=input_dir,
            output_folder=output_folder,
        )

        self._event_bus.emit(
            RunFinishedEvent(
                processed=summary.processed,
                skipped=summary.skipped,
                aborted=summary.aborted,
                segments_created=summary.segments_created,
            )
        )

        return summary

    def process_file(self, source: Path, output_folder: Path) -> FileOutcome:
        """Run one input file to a terminal state. Never raises per-file errors."""
        outcome = FileOutcome(source=source)
        self._advance(outcome, DISCOVERED)

        try:
            match = self._matcher.match(source.stem)
        except MatchError as exc:
            outcome.detail = str(exc)
            self._advance(outcome, SKIPPED)
            self._event_bus.emit(
                FileSkippedEvent(
                    source=str(source),
                    reason=exc.reason,
                    detail=exc.detail,
                )
            )
            LOGGER.info("skipped %s: %s", source.name, exc)
            return outcome

        outcome.start_time = match.timestamp
        outcome.prefix = match.prefix
        self._advance(outcome, DATE_EXTRACTED)
        LOGGER.info(
            "processing %s: start %s, prefix %r",
            source.name,
            match.timestamp.isoformat(sep=" "),
            match.prefix,
        )

        self._advance(outcome, SPLITTING)
        work_dir: Path | None = None

        try:
            try:
                work_dir = Path(
                    tempfile.mkdtemp(prefix="segments_", dir=self._temp_root)
                )
                self._splitter.split(
                    source,
                    self._settings.segment_duration,
                    work_dir,
                    source.suffix[1:].lower(),
                )
                segments = order_segments(
                    p for p in work_dir.iterdir() if p.is_file()
                )
            except (ExternalToolError, OSError) as exc:
                self._abort(outcome, exc)
                return outcome

            self._advance(outcome, RENAMING)

            if not output_folder.is_dir():
                self._abort(
                    outcome,
                    FileNotFoundError(f"output folder {output_folder} is gone"),
                )
                return outcome

            assignments = assign_names(
                segments,
                match.timestamp,
                match.prefix,
                self._settings.segment_duration,
            )
            self._relocate_all(outcome, assignments, output_folder, match)
            self._report_unnamed(outcome, segments[len(assignments):], len(assignments))
            self._advance(outcome, DONE)
        finally:
            if work_dir is not None:
                self._discard(work_dir)

        LOGGER.info("done %s: %d segments", source.name, outcome.segment_count)
        return outcome

    def _relocate_all(
        self,
        outcome: FileOutcome,
        assignments: list[SegmentAssignment],
        output_folder: Path,
        match: MatchResult,
    ) -> None:
        progress = tqdm(
            assignments,
            desc=outcome.source.name,
            unit="segment",
            disable=not self._show_progress,
        )

        for assignment in progress:
            destination = output_folder / assignment.final_name

            try:
                overwritten = relocate_segment(assignment.source, destination)
            except RelocationError as exc:
                outcome.failed.append(assignment.final_name)
                LOGGER.error("%s", exc)
                self._event_bus.emit(
                    SegmentRelocationFailedEvent(
                        source=str(outcome.source),
                        index=assignment.index,
                        final_name=assignment.final_name,
                        error=str(exc.cause),
                    )
                )
                continue

            outcome.produced.append(assignment.final_name)
            if overwritten:
                outcome.overwritten += 1

            self._event_bus.emit(
                SegmentCreatedEvent(
                    source=str(outcome.source),
                    index=assignment.index,
                    final_name=assignment.final_name,
                    timestamp=format_timestamp(assignment.timestamp),
                    overwritten=overwritten,
                )
            )

        LOGGER.debug(
            "%s: %d of %d segments relocated from base time %s",
            outcome.source.name,
            outcome.segment_count,
            len(assignments),
            format_timestamp(match.timestamp),
        )

    def _report_unnamed(
        self,
        outcome: FileOutcome,
        segments: list[Path],
        first_index: int,
    ) -> None:
        for index, segment in enumerate(segments, start=first_index):
            outcome.failed.append(segment.name)
            LOGGER.error(
                "%s: segment %d starts past year 9999 and cannot be named",
                outcome.source.name,
                index,
            )
            self._event_bus.emit(
                SegmentRelocationFailedEvent(
                    source=str(outcome.source),
                    index=index,
                    final_name="",
                    error="timestamp out of range",
                )
            )

    def _advance(
self, outcome: FileOutcome, next_state: str) -> None:
        prev_state = outcome.state

        if not is_valid_transition(prev_state, next_state):
            LOGGER.warning(
                "unexpected state transition %s -> %s for %s",
                prev_state,
                next_state,
                outcome.source.name,
            )

        outcome.state = next_state
        self._event_bus.emit(
            FileStateTransitionEvent(
                source=str(outcome.source),
                prev_state=prev_state,
                next_state=next_state,
            )
        )

    def _abort(self, outcome: FileOutcome, exc: Exception) -> None:
        stage = outcome.state or DISCOVERED
        outcome.detail = str(exc)
        self._advance(outcome, ABORTED)
        self._event_bus.emit(
            FileAbortedEvent(
                source=str(outcome.source),
                stage=stage,
                error=str(exc),
            )
        )
        LOGGER.error("aborted %s during %s: %s", outcome.source.name, stage, exc)

    @staticmethod
    def _discard(work_dir: Path) -> None:
        try:
            shutil.rmtree(work_dir)
        except OSError:
            LOGGER.warning("could not remove transient folder %s", work_dir, exc_info=True)
