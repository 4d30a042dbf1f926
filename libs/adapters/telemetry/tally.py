from __future__ import annotations

import threading

from ports.telemetry import MetricsPort


class TallyMetricsPort(MetricsPort):
    """Keeps a running count and the last value per metric name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}
        self._last: dict[str, float] = {}

    def observe(self, name: str, value: float, **labels: str) -> None:
        with self._lock:
            self._counts[name] = self._counts.get(name, 0) + 1
            self._last[name] = float(value)

    def count(self, name: str) -> int:
        with self._lock:
            return self._counts.get(name, 0)

    def last(self, name: str) -> float | None:
        with self._lock:
            return self._last.get(name)
