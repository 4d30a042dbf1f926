from __future__ import annotations

import time

from ports.time import ClockPort


class MonotonicClock(ClockPort):
    """Monotonic seconds; suitable for deadlines."""

    def now(self) -> float:
        return time.monotonic()
