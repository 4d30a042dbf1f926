from __future__ import annotations

import logging
from typing import Final

from ports.telemetry import ReadingRecord, TelemetryPort

LOG: Final = logging.getLogger("tracker.readings")


class LogTelemetryPort(TelemetryPort):
    """Writes each reading to the log; the console mode's display."""

    def __init__(self, precision: int = 2, level: int = logging.INFO) -> None:
        self._precision = max(0, int(precision))
        self._level = level

    def publish(self, record: ReadingRecord) -> None:
        LOG.log(
            self._level,
            "XP %.*f%% (%d/%d units)",
            self._precision,
            record.percentage,
            record.filled_units,
            record.total_units,
        )
