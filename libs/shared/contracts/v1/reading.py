from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


def format_percentage(value: float, precision: int = 2) -> str:
    return f"{value:.{max(0, precision)}f}%"


class ProgressReading(BaseModel):
    api: Literal["v1"] = "v1"
    percentage: float = Field(ge=0.0, le=100.0)
    filled_units: int = Field(ge=0)
    total_units: int = Field(ge=0)
    ts: float
    fps: float | None = None

    @classmethod
    def from_scan(cls, result, ts: float, fps: float | None = None) -> ProgressReading:
        return cls(
            percentage=result.percentage,
            filled_units=result.filled_units,
            total_units=result.total_units,
            ts=ts,
            fps=fps,
        )

    def display(self, precision: int = 2) -> str:
        return format_percentage(self.percentage, precision)
