"""
Synchronous diagnostic event bus.

Diagnostics are best effort: a sink that raises is logged and skipped, and
the remaining sinks still receive the event. A broken log file never stops
a split run.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from split_audio.core.events.event_sink import EventSink

LOGGER = logging.getLogger(__name__)


class EventBus:
    """Dispatches run events to a fixed set of sinks, in order."""

    def __init__(self, sinks: Iterable[EventSink] = ()) -> None:
        self._sinks: tuple[EventSink, ...] = tuple(sinks)
        self._closed = False

    def emit(self, event: Any) -> None:
        for sink in self._sinks:
            try:
                sink.on_event(event)
            except Exception:
                LOGGER.exception(
                    "event sink %s failed on %s",
                    type(sink).__name__,
                    type(event).__name__,
                )

    def close(self) -> None:
        """Close every sink that has a close() method, once."""
        if self._closed:
            return
        self._closed = True

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if not callable(close_fn):
                continue
            try:
                close_fn()
            except Exception:
                LOGGER.exception("event sink %s failed to close", type(sink).__name__)
