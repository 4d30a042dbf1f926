# libs/domain/meter/ticks.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ports.vision import Frame

from .classifier import is_filled, is_filled_marker, is_marker

TICK_WIDTH: Final = 4  # divider ticks are 4 px wide


@dataclass(frozen=True)
class TickRun:
    filled: bool

    @property
    def filled_units(self) -> int:
        return TICK_WIDTH if self.filled else 0


def is_tick_run(frame: Frame, x: int, y: int) -> bool:
    """True when columns x..x+3 on row y are all marker pixels."""
    if x < 0 or x + TICK_WIDTH > frame.width:
        return False
    return all(is_marker(frame.pixel(x + i, y)) for i in range(TICK_WIDTH))


def detect_tick_run(frame: Frame, x: int, y: int) -> TickRun | None:
    if not is_tick_run(frame, x, y):
        return None

    # missing neighbours count as not filled
    left_filled = x > 0 and is_filled(frame.pixel(x - 1, y))
    right = x + TICK_WIDTH
    right_filled = right < frame.width and is_filled(frame.pixel(right, y))

    marker_filled = any(is_filled_marker(frame.pixel(x + i, y)) for i in range(TICK_WIDTH))
    return TickRun(filled=(left_filled and right_filled) or marker_filled)
