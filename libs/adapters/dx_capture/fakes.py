from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable

from ports.vision import CaptureError, CapturePort, Frame, Region


class FakeCapturePort(CapturePort):
    """Plays back a script of frames and failures.

    Each grab takes the next scripted item: a Frame is returned, an exception
    is raised. Once the script runs out, ``default`` is returned (or
    CaptureError raised when there is none).
    """

    def __init__(
        self,
        script: Iterable[Frame | BaseException] = (),
        default: Frame | None = None,
        fps_value: float = 4.0,
    ) -> None:
        self._script: deque[Frame | BaseException] = deque(script)
        self._default = default
        self._fps = float(fps_value)
        self._lock = threading.Lock()
        self.grabs = 0
        self.regions: list[Region] = []
        self.opened = 0
        self.closed = 0
        self.is_open = False

    def open(self) -> None:
        self.opened += 1
        self.is_open = True

    def grab_region(self, region: Region) -> Frame:
        with self._lock:
            self.grabs += 1
            self.regions.append(region)
            item = self._script.popleft() if self._script else self._default
        if item is None:
            raise CaptureError("no frame scripted")
        if isinstance(item, BaseException):
            raise item
        return item

    def fps(self) -> float:
        return self._fps

    def close(self) -> None:
        self.closed += 1
        self.is_open = False
