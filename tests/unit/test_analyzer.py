from __future__ import annotations

import pytest
from domain.meter import ScanResult, analyze
from ports.vision import Frame, Region

F = (0x2D, 0x67, 0xE2)  # fill
M = (0x99, 0xA6, 0xC0)  # marker
FM = (0x9B, 0xB0, 0xED)  # filled marker
B = (0x00, 0x22, 0x40)  # background
U = (0xFF, 0xFF, 0xFF)  # not part of the bar


def _scan(*pixels):
    """One-row frame plus a matching region at an arbitrary screen offset."""
    frame = Frame.from_rgb(len(pixels), 1, pixels)
    return frame, Region(left=100, top=900, right=100 + len(pixels), bottom=901)


def test_all_background_is_zero():
    result = analyze(*_scan(*[B] * 20))
    assert result == ScanResult(filled_units=0, total_units=20, percentage=0.0)


def test_all_filled_is_hundred():
    result = analyze(*_scan(*[F] * 20))
    assert result.percentage == 100.0
    assert result.filled_units == result.total_units == 20


def test_half_filled_bar():
    result = analyze(*_scan(*[F] * 10, *[B] * 10))
    assert result.percentage == pytest.approx(50.0)


def test_tick_with_missing_right_neighbour_scenario():
    # 0-4 filled, 5-8 tick; column 9 does not exist
    result = analyze(*_scan(F, F, F, F, F, M, M, M, M))
    assert (result.filled_units, result.total_units) == (5, 9)
    assert result.percentage == pytest.approx(55.5556, abs=1e-3)


def test_tick_with_unknown_right_neighbour_scenario():
    # 10 wide, column 9 is not a bar pixel: not filled and not counted
    result = analyze(*_scan(F, F, F, F, F, M, M, M, M, U))
    assert (result.filled_units, result.total_units) == (5, 9)
    assert result.percentage == pytest.approx(55.5556, abs=1e-3)


def test_tick_inside_filled_area_counts_as_filled():
    result = analyze(*_scan(*[F] * 5, M, M, M, M, *[F] * 5))
    assert (result.filled_units, result.total_units) == (14, 14)


def test_filled_marker_tick_counts_between_background():
    result = analyze(*_scan(B, B, B, B, M, FM, M, M, B, B, B, B))
    assert (result.filled_units, result.total_units) == (4, 12)
    assert result.percentage == pytest.approx(100.0 / 3.0)


def test_tick_contributions_are_atomic():
    # 6 markers: one 4-wide run, then two stray marker pixels scored singly
    result = analyze(*_scan(M, M, M, M, M, M, B, B))
    assert result.total_units == 8
    assert result.filled_units == 0


def test_filled_units_from_ticks_are_multiples_of_four():
    pixels = [B, M, M, M, M, B, F, M, M, M, M, F, B, M, FM, M, M, B]
    result = analyze(*_scan(*pixels))
    # singles: B,B,F,F,B,B -> 2 filled of 6; ticks: 3 runs, two filled
    assert result.total_units == 6 + 12
    assert result.filled_units == 2 + 8


def test_unknown_pixels_are_skipped():
    result = analyze(*_scan(U, F, U, B, U))
    assert (result.filled_units, result.total_units) == (1, 2)
    assert result.percentage == pytest.approx(50.0)


def test_all_unknown_is_degenerate_zero():
    assert analyze(*_scan(U, U, U)) == ScanResult.empty()


def test_samples_the_middle_row():
    width = 8
    pixels = [B] * width + [F] * width + [B] * width
    frame = Frame.from_rgb(width, 3, pixels)
    result = analyze(frame, Region(0, 0, width, 3))
    assert result.percentage == 100.0


@pytest.mark.parametrize(
    "region",
    [Region(0, 0, 0, 5), Region(0, 0, 5, 0), Region(10, 10, 5, 20)],
)
def test_region_without_area_gives_empty_result(region):
    frame = Frame(width=0, height=0, bgra=b"")
    assert analyze(frame, region) == ScanResult(0, 0, 0.0)


def test_analyze_is_deterministic():
    frame, region = _scan(F, F, M, M, M, M, B, U, FM, B)
    assert analyze(frame, region) == analyze(frame, region)


def test_frame_and_region_size_must_agree():
    frame = Frame.from_rgb(3, 1, [F, F, F])
    with pytest.raises(ValueError):
        analyze(frame, Region(0, 0, 5, 1))
