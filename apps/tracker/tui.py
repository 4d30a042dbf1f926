from __future__ import annotations

import threading
import time

from adapters.telemetry import QueueTelemetryPort, TallyMetricsPort
from ports.vision import Region
from rich.text import Text
from shared.contracts.v1 import ProgressReading
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from apps.tracker.compose import TrackerApp


class TrackerTUI(App):
    CSS_PATH = None
    CSS = """
    #reading {
        content-align: center middle;
        height: 5;
        text-style: bold;
    }
    """
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("s", "toggle", "Start/Stop"),
        ("?", "help", "Help"),
    ]

    def __init__(self, tracker: TrackerApp, region: Region, inbox: QueueTelemetryPort) -> None:
        super().__init__()
        self.tracker = tracker
        self.bar_region = region
        self.inbox = inbox
        self._reader_thread: threading.Thread | None = None
        self._stop = threading.Event()
        self._reading_label: Static | None = None
        self._status: Static | None = None
        self._last_reading: ProgressReading | None = None
        self._last_seen: float | None = None
        self._stale_factor: float = 3.0

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._reading_label = Static("--.--%", id="reading")
        self._status = Static("")
        yield self._reading_label
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        self._start_sampling()
        self._stop.clear()
        self._reader_thread = threading.Thread(
            target=self._reading_loop, name="tui-reader", daemon=True
        )
        self._reader_thread.start()
        self.set_interval(self.tracker.scheduler.period, self._update_view)

    def on_unmount(self) -> None:
        self._stop.set()
        self.tracker.stop()
        if self._reader_thread and self._reader_thread.is_alive():
            self._reader_thread.join(timeout=1.0)

    # ----- Actions (key bindings) -----

    def action_quit(self) -> None:
        self.exit()

    def action_toggle(self) -> None:
        if self.tracker.running:
            self.tracker.stop()
            self.notify("Sampling stopped", severity="information")
        else:
            self._start_sampling()
        self._update_view()

    def action_help(self) -> None:
        self.notify(
            "Keys: q quit • s start/stop sampling • ? help\n"
            "The reading turns yellow when no sample arrived for a few ticks.",
            severity="information",
        )

    def _start_sampling(self) -> None:
        if not self.tracker.start(self.bar_region):
            self.notify(f"Could not start sampling {self.bar_region}", severity="error")

    # ----- Reading loop -----

    def _reading_loop(self) -> None:
        while not self._stop.is_set():
            msg = self.inbox.recv(timeout_ms=250)
            if msg is None:
                continue
            self._last_reading = msg
            self._last_seen = time.monotonic()
            self.call_from_thread(self._update_view)

    # ----- Rendering -----

    def _update_view(self) -> None:
        if self._reading_label:
            self._reading_label.update(self._reading_text())
        if self._status:
            self._status.update(self._status_text())

    def _classify(self) -> str:
        """Return OK | STALE | STOPPED | WAITING."""
        if not self.tracker.running:
            return "STOPPED"
        if self._last_seen is None:
            return "WAITING"
        age = time.monotonic() - self._last_seen
        return "STALE" if age > self._stale_factor * self.tracker.scheduler.period else "OK"

    def _reading_text(self) -> Text:
        precision = self.tracker.settings.precision
        label = self._last_reading.display(precision) if self._last_reading else "--.--%"
        status = self._classify()
        if status == "OK":
            return Text(label, style="bold cyan")
        if status == "STALE":
            return Text(label, style="yellow")
        return Text(label, style="dim")

    def _status_text(self) -> str:
        r = self.bar_region
        last = self._last_reading
        fps = f"{last.fps:.1f}" if last and last.fps is not None else "-"
        failures = 0
        if isinstance(self.tracker.metrics, TallyMetricsPort):
            failures = self.tracker.metrics.count("capture_failures")
        return (
            f"Region: ({r.left},{r.top})-({r.right},{r.bottom}) {r.width}x{r.height}"
            + f" • {self._classify()} • Readings: {self.tracker.readings}"
            + f" • FPS: {fps} • Capture failures: {failures} • Q quit  ? help"
        )
