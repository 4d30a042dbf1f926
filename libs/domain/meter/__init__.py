from .analyzer import analyze
from .classifier import (
    classify,
    is_background,
    is_bar_pixel,
    is_filled,
    is_filled_marker,
    is_marker,
)
from .model import PixelClass, ScanResult
from .service import SAMPLE_HZ, SampleScheduler
from .ticks import TICK_WIDTH, TickRun, detect_tick_run, is_tick_run

__all__ = [
    "analyze",
    "classify",
    "is_bar_pixel",
    "is_background",
    "is_filled",
    "is_filled_marker",
    "is_marker",
    "PixelClass",
    "ScanResult",
    "SampleScheduler",
    "SAMPLE_HZ",
    "TICK_WIDTH",
    "TickRun",
    "detect_tick_run",
    "is_tick_run",
]
