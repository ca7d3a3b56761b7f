"""
Event sink interface.

Sinks consume diagnostic events emitted during a run.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a diagnostic event."""
