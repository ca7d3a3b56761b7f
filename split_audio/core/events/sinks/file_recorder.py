"""
Append-only file recorder sink.
"""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any


class FileRecorderSink:
    """Writes each event as a JSON line to a file.

    Every line carries the wall-clock time it was written and the event
    type, followed by the event fields.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    def on_event(self, event: Any) -> None:
        if is_dataclass(event) and not isinstance(event, type):
            fields = asdict(event)
        else:
            fields = {"event": str(event)}

        record = {
            "logged_at": datetime.now().isoformat(timespec="seconds"),
            "type": type(event).__name__,
            **fields,
        }
        self._fh.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
