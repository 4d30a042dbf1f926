# tests/e2e/test_tracker_smoke.py
from __future__ import annotations

import time
from pathlib import Path

import pytest
from adapters.dx_capture import FakeCapturePort
from adapters.telemetry import FakeTelemetryPort
from ports.vision import CaptureError, Frame, Region
from shared.config.loader import load_saved_region

from apps.tracker.__main__ import main
from apps.tracker.compose import TrackerApp
from apps.tracker.settings import CaptureSettings, TrackerSettings

F = (0x2D, 0x67, 0xE2)
M = (0x99, 0xA6, 0xC0)
B = (0x00, 0x22, 0x40)

# 8 filled, a tick between filled pixels, 7 background
BAR = [F] * 8 + [M] * 4 + [F] + [B] * 7
REGION = Region(600, 1000, 600 + len(BAR), 1003)


def _bar_frame() -> Frame:
    return Frame.from_rgb(len(BAR), 3, [B] * len(BAR) + BAR + [B] * len(BAR))


def test_tracker_smoke_readings_flow(tmp_path: Path):
    telem = FakeTelemetryPort()
    cap = FakeCapturePort(script=[CaptureError("first grab fails")], default=_bar_frame())
    app = TrackerApp(
        TrackerSettings(capture=CaptureSettings(adapter="fake"), state_file=tmp_path / "s.toml"),
        capture=cap,
        telemetry=telem,
        sample_hz=40.0,
    )
    assert app.start(REGION)
    try:
        end = time.monotonic() + 3.0
        while len(telem.records) < 3 and time.monotonic() < end:
            time.sleep(0.01)
    finally:
        app.stop()

    recs = telem.records
    assert len(recs) >= 3
    # 9 filled + 4 tick of 20 units
    assert recs[-1]["filled_units"] == 13
    assert recs[-1]["total_units"] == 20
    assert recs[-1]["percentage"] == pytest.approx(65.0)
    assert app.last is not None and app.last.display() == "65.00%"
    assert cap.closed == 1


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ("XPB_PROFILE", "XPB_REGION", "XPB_UI", "XPB_CAPTURE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XPB_CONFIG_DIR", str(tmp_path / "profiles"))
    state = tmp_path / "state.toml"
    monkeypatch.setenv("XPB_STATE_FILE", str(state))
    return state


def test_cli_without_region_exits_2(isolated_env: Path):
    assert main(["--quiet"]) == 2


def test_cli_rejects_region_without_area(isolated_env: Path):
    assert main(["--quiet", "--region", "10,10,10,20"]) == 2


def test_cli_save_region_then_fail_to_start(isolated_env: Path, monkeypatch: pytest.MonkeyPatch):
    # the region is persisted before sampling starts
    monkeypatch.setenv("XPB_CAPTURE", '{"adapter": "fake"}')
    monkeypatch.setattr(TrackerApp, "start", lambda self, region: False)
    assert main(["--quiet", "--region", "1,2,30,5", "--save-region"]) == 2
    assert load_saved_region(isolated_env) == Region(1, 2, 30, 5)
