from .fakes import FakeMetricsPort, FakeTelemetryPort
from .inbox import QueueTelemetryPort
from .log import LogTelemetryPort
from .tally import TallyMetricsPort

__all__ = [
    "FakeTelemetryPort",
    "FakeMetricsPort",
    "LogTelemetryPort",
    "QueueTelemetryPort",
    "TallyMetricsPort",
]
