# libs/domain/meter/classifier.py
"""Per-pixel color tests against the bar's reference colors.

Each reference color matches when every channel is within its tolerance
(Chebyshev distance, inclusive). The tests are independent: callers that need
"any marker" or "filled marker" ask for exactly that instead of going through
``classify``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ports.vision import RGB

from .model import PixelClass


@dataclass(frozen=True)
class ReferenceColor:
    r: int
    g: int
    b: int
    tolerance: int

    def distance(self, sample: RGB) -> int:
        r, g, b = sample
        return max(abs(r - self.r), abs(g - self.g), abs(b - self.b))

    def matches(self, sample: RGB) -> bool:
        return self.distance(sample) <= self.tolerance


FILL: Final = ReferenceColor(0x2D, 0x67, 0xE2, tolerance=20)
MARKER: Final = ReferenceColor(0x99, 0xA6, 0xC0, tolerance=12)
FILLED_MARKER: Final = ReferenceColor(0x9B, 0xB0, 0xED, tolerance=12)
BACKGROUND: Final = ReferenceColor(0x00, 0x22, 0x40, tolerance=8)


def is_filled(sample: RGB) -> bool:
    return FILL.matches(sample)


def is_background(sample: RGB) -> bool:
    return BACKGROUND.matches(sample)


def is_filled_marker(sample: RGB) -> bool:
    return FILLED_MARKER.matches(sample)


def is_marker(sample: RGB) -> bool:
    """Either marker variant, fill state not distinguished."""
    return MARKER.matches(sample) or FILLED_MARKER.matches(sample)


def is_bar_pixel(sample: RGB) -> bool:
    return is_filled(sample) or is_background(sample) or is_marker(sample)


def classify(sample: RGB) -> PixelClass:
    if is_filled(sample):
        return PixelClass.FILLED
    if is_background(sample):
        return PixelClass.BACKGROUND
    if is_filled_marker(sample):
        return PixelClass.FILLED_MARKER
    if MARKER.matches(sample):
        return PixelClass.MARKER
    return PixelClass.UNKNOWN
