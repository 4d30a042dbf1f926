from __future__ import annotations

from queue import Empty, SimpleQueue
from typing import Any

from ports.telemetry import TelemetryPort


class QueueTelemetryPort(TelemetryPort):
    """Thread-safe hand-off of readings to a reader on another thread (the TUI)."""

    def __init__(self) -> None:
        self._q: SimpleQueue[Any] = SimpleQueue()

    def publish(self, record: Any) -> None:
        self._q.put(record)

    def recv(self, timeout_ms: int = 100) -> Any | None:
        try:
            return self._q.get(timeout=timeout_ms / 1000.0)
        except Empty:
            return None
