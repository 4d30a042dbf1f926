from __future__ import annotations

import threading
from types import SimpleNamespace

import adapters.dx_capture.mss as mss_adapter
import pytest
from adapters.dx_capture.mss import MSSCapture
from ports.vision import CaptureError, Region


class _ThreadBoundSession:
    """Behaves like an mss session whose handles live on the creating thread."""

    created: list[_ThreadBoundSession] = []

    def __init__(self) -> None:
        self.owner = threading.get_ident()
        self.grabs = 0
        self.closed = False
        _ThreadBoundSession.created.append(self)

    def grab(self, rect: dict[str, int]) -> SimpleNamespace:
        if threading.get_ident() != self.owner:
            raise AttributeError("'_thread._local' object has no attribute 'display'")
        self.grabs += 1
        w, h = rect["width"], rect["height"]
        return SimpleNamespace(width=w, height=h, bgra=bytes(w * h * 4))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_mss(monkeypatch):
    _ThreadBoundSession.created = []
    monkeypatch.setattr(mss_adapter, "mss", SimpleNamespace(mss=_ThreadBoundSession))
    return _ThreadBoundSession


def _grab_on_worker(cap: MSSCapture, region: Region, times: int = 1) -> list[object]:
    out: list[object] = []

    def run() -> None:
        try:
            for _ in range(times):
                out.append(cap.grab_region(region))
        except Exception as e:
            out.append(e)

    t = threading.Thread(target=run, name="grabber")
    t.start()
    t.join(5.0)
    return out


def test_grab_on_another_thread_than_open(fake_mss):
    cap = MSSCapture()
    cap.open()

    out = _grab_on_worker(cap, Region(0, 0, 3, 2))

    assert len(out) == 1 and not isinstance(out[0], Exception)
    assert out[0].size() == (3, 2)
    assert len(fake_mss.created) == 2
    opener, grabber = fake_mss.created
    assert opener.owner == threading.get_ident()
    assert grabber.owner != opener.owner and grabber.grabs == 1


def test_each_thread_reuses_its_own_session(fake_mss):
    cap = MSSCapture()
    cap.grab_region(Region(0, 0, 1, 1))
    cap.grab_region(Region(0, 0, 1, 1))
    assert len(fake_mss.created) == 1
    assert fake_mss.created[0].grabs == 2


def test_close_releases_every_session(fake_mss):
    cap = MSSCapture()
    cap.open()
    _grab_on_worker(cap, Region(0, 0, 1, 1))
    cap.close()
    assert [s.closed for s in fake_mss.created] == [True, True]
    assert cap.fps() == 0.0

    # a fresh session after close
    cap.grab_region(Region(0, 0, 1, 1))
    assert len(fake_mss.created) == 3


def test_fps_counts_grabs_made_while_it_is_read(fake_mss):
    cap = MSSCapture()
    done = threading.Event()

    def poll() -> None:
        while not done.is_set():
            cap.fps()

    reader = threading.Thread(target=poll, name="fps-reader")
    reader.start()
    try:
        out = _grab_on_worker(cap, Region(0, 0, 1, 1), times=200)
    finally:
        done.set()
        reader.join(5.0)

    assert len(out) == 200
    assert cap.fps() == 200.0


def test_open_without_mss_is_a_capture_error(monkeypatch):
    monkeypatch.setattr(mss_adapter, "mss", None)
    cap = MSSCapture()
    with pytest.raises(CaptureError):
        cap.open()
    with pytest.raises(CaptureError):
        cap.grab_region(Region(0, 0, 1, 1))
