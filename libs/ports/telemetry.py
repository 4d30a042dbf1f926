from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class ReadingRecord(Protocol):
    percentage: float
    filled_units: int
    total_units: int
    ts: float


class TelemetryPort(ABC):
    @abstractmethod
    def publish(self, record: ReadingRecord) -> None: ...


class MetricsPort(ABC):
    @abstractmethod
    def observe(self, name: str, value: float, **labels: str) -> None: ...
