# libs/ports/vision.py
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

RGB = tuple[int, int, int]


class CaptureError(RuntimeError):
    """Raised by capture adapters when no frame can be produced."""


@dataclass(frozen=True)
class Region:
    """Screen rectangle; right/bottom are exclusive."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def parse(cls, text: str) -> Region:
        """Parse "left,top,right,bottom"."""
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Region needs 4 comma-separated ints, got: {text!r}")
        left, top, right, bottom = (int(p) for p in parts)
        return cls(left=left, top=top, right=right, bottom=bottom)


@dataclass(frozen=True)
class Frame:
    width: int
    height: int
    # raw BGRA bytes (row-major). Keep it tech-agnostic.
    bgra: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Negative frame size: {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.bgra) != expected:
            raise ValueError(
                f"Frame {self.width}x{self.height} needs {expected} bytes, got {len(self.bgra)}"
            )

    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> RGB:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        o = (y * self.width + x) * 4
        b, g, r = self.bgra[o], self.bgra[o + 1], self.bgra[o + 2]
        return r, g, b

    @classmethod
    def from_rgb(cls, width: int, height: int, pixels: Iterable[RGB]) -> Frame:
        buf = bytearray()
        for r, g, b in pixels:
            buf += bytes((b, g, r, 0xFF))
        return cls(width=width, height=height, bgra=bytes(buf))


class CapturePort(Protocol):
    def open(self) -> None: ...
    def grab_region(self, region: Region) -> Frame: ...
    def fps(self) -> float: ...
    def close(self) -> None: ...
