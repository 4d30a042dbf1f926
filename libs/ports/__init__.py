from .telemetry import MetricsPort, TelemetryPort
from .time import ClockPort
from .vision import CaptureError, CapturePort, Frame, Region

__all__ = [
    "CapturePort",
    "CaptureError",
    "Frame",
    "Region",
    "TelemetryPort",
    "MetricsPort",
    "ClockPort",
]
