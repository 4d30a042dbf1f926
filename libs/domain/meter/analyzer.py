# libs/domain/meter/analyzer.py
from __future__ import annotations

from ports.vision import Frame, Region

from .classifier import is_bar_pixel, is_filled
from .model import ScanResult
from .ticks import TICK_WIDTH, detect_tick_run


def analyze(frame: Frame, region: Region) -> ScanResult:
    """Score the middle scanline of ``frame`` as a fill percentage.

    Pixels that are not part of the bar are skipped. A 4 px divider tick is
    scored as one unit of 4 (all filled or all empty); every other bar pixel
    scores 1, filled iff it has the fill color. Pure: no state survives the call.

    An invalid region gives ``ScanResult.empty()``. A frame whose size does not
    match the region is a caller error.
    """
    if not region.is_valid:
        return ScanResult.empty()
    if frame.size() != region.size():
        raise ValueError(f"Frame size {frame.size()} does not match region size {region.size()}")

    width = region.width
    y = region.height // 2
    filled = 0
    total = 0

    x = 0
    while x < width:
        sample = frame.pixel(x, y)
        if not is_bar_pixel(sample):
            x += 1
            continue

        run = detect_tick_run(frame, x, y)
        if run is not None:
            total += TICK_WIDTH
            filled += run.filled_units
            x += TICK_WIDTH
            continue

        if is_filled(sample):
            filled += 1
        total += 1
        x += 1

    return ScanResult.from_counts(filled, total)
