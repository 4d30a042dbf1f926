# libs/domain/meter/service.py
from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from queue import Empty, Full, Queue
from typing import Final

from ports.telemetry import MetricsPort
from ports.time import ClockPort
from ports.vision import CapturePort, Region

from .analyzer import analyze
from .model import ScanResult

LOG: Final = logging.getLogger("meter.scheduler")

SAMPLE_HZ: Final = 4.0

ResultCallback = Callable[[ScanResult], None]

_STOP: Final = object()  # delivery queue sentinel


def _hand_off(outbox: Queue[object], item: object) -> None:
    """Put item in the one-slot outbox, dropping an undelivered older item."""
    while True:
        try:
            outbox.put_nowait(item)
            return
        except Full:
            try:
                outbox.get_nowait()
            except Empty:
                pass


class _Session:
    """Everything owned by one start()..stop() cycle."""

    def __init__(self, region: Region, capture: CapturePort, on_result: ResultCallback) -> None:
        self.region: Final = region
        self.capture: Final = capture
        self.on_result: Final = on_result
        self.stop = threading.Event()
        self.outbox: Queue[object] = Queue(maxsize=1)
        self.sampler: threading.Thread | None = None
        self.delivery: threading.Thread | None = None


class SampleScheduler:
    """Fixed-cadence sampling session: capture, analyze, hand off the result.

    One sampler thread does capture + analysis; one delivery thread calls the
    consumer, so a slow consumer never stretches the sampling period. Only the
    newest undelivered result is kept, and nothing is delivered once stop() began.
    """

    def __init__(
        self,
        clock: ClockPort,
        sample_hz: float = SAMPLE_HZ,
        metrics: MetricsPort | None = None,
        delivery_timeout: float = 1.0,
    ) -> None:
        self.clock: Final = clock
        self.metrics: Final = metrics
        self._period = 1.0 / max(0.1, sample_hz)
        self._delivery_timeout = delivery_timeout
        self._lock = threading.Lock()
        self._session: _Session | None = None

    @property
    def period(self) -> float:
        return self._period

    @property
    def running(self) -> bool:
        return self._session is not None

    # ----- lifecycle -----

    def start(self, region: Region, capture: CapturePort, on_result: ResultCallback) -> bool:
        with self._lock:
            if self._session is not None:
                LOG.warning("start() ignored: already sampling %s", self._session.region)
                return False
            if not region.is_valid:
                LOG.error("Invalid region %s (%dx%d)", region, region.width, region.height)
                return False
            try:
                capture.open()
            except Exception as ex:
                LOG.error("Capture could not be opened: %r", ex)
                return False

            session = _Session(region, capture, on_result)
            session.sampler = threading.Thread(
                target=self._sample_loop, args=(session,), name="meter-sampler", daemon=True
            )
            session.delivery = threading.Thread(
                target=self._delivery_loop, args=(session,), name="meter-delivery", daemon=True
            )
            self._session = session
            session.delivery.start()
            session.sampler.start()

        LOG.info("Sampling %s every %.0f ms", region, self._period * 1000.0)
        return True

    def stop(self) -> None:
        with self._lock:
            session = self._session
            if session is None:
                return

            session.stop.set()
            current = threading.current_thread()
            if session.sampler is not None and session.sampler is not current:
                session.sampler.join()

            _hand_off(session.outbox, _STOP)
            if session.delivery is not None and session.delivery is not current:
                session.delivery.join(timeout=self._delivery_timeout)
                if session.delivery.is_alive():
                    LOG.warning(
                        "Result consumer still busy after %.1fs; abandoning it",
                        self._delivery_timeout,
                    )

            try:
                session.capture.close()
            except Exception as ex:
                LOG.warning("Capture close failed: %r", ex)
            self._session = None
        LOG.info("Sampling stopped")

    # ----- one tick -----

    def sample_once(self, region: Region, capture: CapturePort) -> ScanResult | None:
        """Capture and analyze one frame; None when the capture failed."""
        try:
            frame = capture.grab_region(region)
        except Exception as ex:
            LOG.debug("Capture failed: %r", ex)
            self._observe("capture_failures", 1.0)
            return None

        if frame.size() != region.size():
            LOG.debug("Capture returned %s, expected %s", frame.size(), region.size())
            self._observe("capture_failures", 1.0)
            return None

        t0 = self.clock.now()
        result = analyze(frame, region)
        self._observe("scan_ms", (self.clock.now() - t0) * 1000.0)
        return result

    # ----- threads -----

    def _sample_loop(self, session: _Session) -> None:
        failures = 0
        deadline = self.clock.now()
        while not session.stop.is_set():
            result = self.sample_once(session.region, session.capture)
            if result is None:
                failures += 1
                if failures == 1:
                    LOG.warning("No frame this tick; retrying every %.0f ms", self._period * 1000.0)
            else:
                if failures:
                    LOG.info("Capture recovered after %d failed tick(s)", failures)
                failures = 0
                _hand_off(session.outbox, result)

            # next deadline is previous deadline + period, never now + period
            deadline += self._period
            delay = deadline - self.clock.now()
            if delay > 0:
                session.stop.wait(delay)

    def _delivery_loop(self, session: _Session) -> None:
        while True:
            item = session.outbox.get()
            if item is _STOP or session.stop.is_set():
                return
            assert isinstance(item, ScanResult)
            try:
                session.on_result(item)
            except Exception:
                LOG.exception("Result consumer raised; continuing")

    def _observe(self, name: str, value: float) -> None:
        if self.metrics is None:
            return
        try:
            self.metrics.observe(name, value)
        except Exception:
            LOG.debug("metrics.observe(%s) failed", name, exc_info=True)
