from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PixelClass(Enum):
    BACKGROUND = "background"
    FILLED = "filled"
    MARKER = "marker"
    FILLED_MARKER = "filled_marker"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ScanResult:
    filled_units: int
    total_units: int
    percentage: float

    @classmethod
    def empty(cls) -> ScanResult:
        return cls(filled_units=0, total_units=0, percentage=0.0)

    @classmethod
    def from_counts(cls, filled_units: int, total_units: int) -> ScanResult:
        if total_units <= 0:
            return cls.empty()
        return cls(
            filled_units=filled_units,
            total_units=total_units,
            percentage=filled_units * 100.0 / total_units,
        )
