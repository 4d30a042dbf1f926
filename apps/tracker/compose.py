from __future__ import annotations

import logging
from typing import Final

from adapters.dx_capture import FakeCapturePort
from adapters.dx_capture.mss import MSSCapture
from adapters.telemetry import LogTelemetryPort, TallyMetricsPort
from adapters.time import MonotonicClock
from domain.meter import SAMPLE_HZ, SampleScheduler, ScanResult
from ports.telemetry import MetricsPort, TelemetryPort
from ports.time import ClockPort
from ports.vision import CapturePort, Region
from shared.config.loader import load_saved_region
from shared.contracts.v1 import ProgressReading

from apps.tracker.settings import TrackerSettings

LOG: Final = logging.getLogger("tracker")


def build_capture(settings: TrackerSettings) -> CapturePort:
    if settings.capture.adapter == "mss":
        return MSSCapture()
    if settings.capture.adapter == "fake":
        return FakeCapturePort()
    raise ValueError(f"Unknown capture adapter: {settings.capture.adapter}")


class TrackerApp:
    """Composition root: capture + scheduler + telemetry for one bar region."""

    def __init__(
        self,
        settings: TrackerSettings,
        capture: CapturePort | None = None,
        telemetry: TelemetryPort | None = None,
        metrics: MetricsPort | None = None,
        clock: ClockPort | None = None,
        sample_hz: float = SAMPLE_HZ,
    ) -> None:
        self.settings = settings
        self.clock: ClockPort = clock or MonotonicClock()
        self.capture: CapturePort = capture or build_capture(settings)
        self.telemetry: TelemetryPort = telemetry or LogTelemetryPort(precision=settings.precision)
        self.metrics: MetricsPort = metrics or TallyMetricsPort()
        self.scheduler = SampleScheduler(
            clock=self.clock, sample_hz=sample_hz, metrics=self.metrics
        )
        self.region: Region | None = None
        self.last: ProgressReading | None = None
        self.readings = 0

    def resolve_region(self, explicit: Region | None = None) -> Region | None:
        """Command line first, then settings, then the saved state file."""
        if explicit is not None:
            return explicit
        if self.settings.region is not None:
            return self.settings.region.to_region()
        return load_saved_region(self.settings.state_file)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self, region: Region) -> bool:
        if not self.scheduler.start(region, self.capture, self._on_result):
            return False
        self.region = region
        return True

    def stop(self) -> None:
        self.scheduler.stop()

    def sample_once(self, region: Region) -> ProgressReading | None:
        """Synchronous single tick (no threads).

        Outside a running session the capture is opened for this tick and closed
        again afterwards.
        """
        owned = not self.running
        if owned:
            self.capture.open()
        try:
            result = self.scheduler.sample_once(region, self.capture)
            if result is None:
                return None
            return self._on_result(result)
        finally:
            if owned:
                self.capture.close()

    def _on_result(self, result: ScanResult) -> ProgressReading:
        try:
            fps: float | None = float(self.capture.fps())
        except Exception:
            fps = None
        reading = ProgressReading.from_scan(result, ts=self.clock.now(), fps=fps)
        self.last = reading
        self.readings += 1
        self.telemetry.publish(reading)
        return reading
