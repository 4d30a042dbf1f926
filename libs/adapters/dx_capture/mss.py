from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Any, Final

try:
    import mss  # type: ignore
except Exception:  # pragma: no cover
    mss = None

from ports.vision import CaptureError, CapturePort, Frame, Region

LOG: Final = logging.getLogger("capture.mss")


class MSSCapture(CapturePort):
    """Grabs screen rectangles in absolute (virtual-screen) coordinates.

    An mss session only works on the thread that created it, so every grabbing
    thread lazily gets its own; close() releases all of them.
    """

    def __init__(self) -> None:
        self._local = threading.local()
        self._sessions: list[Any] = []
        self._lock = threading.Lock()
        self._last_times: deque[float] = deque()

    def open(self) -> None:
        if mss is None:
            raise CaptureError("mss is not installed")
        self._session()

    def grab_region(self, region: Region) -> Frame:
        sct = self._session()
        rect: dict[str, int] = {
            "left": int(region.left),
            "top": int(region.top),
            "width": int(region.width),
            "height": int(region.height),
        }
        try:
            shot: Any = sct.grab(rect)
        except Exception as e:
            raise CaptureError(f"Screen grab failed for {rect}: {e!r}") from e
        # Prefer BGRA if available; fall back to raw
        if hasattr(shot, "bgra"):
            bgra_bytes = bytes(shot.bgra)
        else:
            bgra_bytes = bytes(shot.raw)
        self._tick_fps()
        return Frame(width=shot.width, height=shot.height, bgra=bgra_bytes)

    def fps(self) -> float:
        now = time.perf_counter()
        with self._lock:
            while self._last_times and now - self._last_times[0] > 1.0:
                self._last_times.popleft()
            return float(len(self._last_times))

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
            self._last_times.clear()
        for sct in sessions:
            try:
                sct.close()
            except Exception as e:
                LOG.debug("mss close failed: %r", e)

    def _session(self) -> Any:
        sct = getattr(self._local, "sct", None)
        if sct is not None:
            return sct
        if mss is None:
            raise CaptureError("mss is not installed")
        try:
            sct = mss.mss()
        except Exception as e:
            raise CaptureError(f"Failed to open screen capture: {e!r}") from e
        with self._lock:
            self._local.sct = sct
            self._sessions.append(sct)
        LOG.debug("mss session opened on %s", threading.current_thread().name)
        return sct

    def _tick_fps(self) -> None:
        with self._lock:
            self._last_times.append(time.perf_counter())
