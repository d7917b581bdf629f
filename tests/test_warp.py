"""Test the sinusoidal warp filter.

Tests for src.raster.warp:
    - Amplitude 0 is the identity
    - Non-positive period is rejected
    - Off-canvas and transparent samples leave the pixel unchanged
    - Snapshot vs legacy in-place reads
    - Offsets round half up in both modes

A very long period makes the wave flat: sin(y·k) ≈ 0 and cos(x·k) ≈ 1,
so every pixel reads (x, y + round(amplitude)). That turns the warp into
a vertical shift whose result is easy to predict.

Run:
    pytest tests/test_warp.py -v
"""

import numpy as np
import pytest

from src.raster import Canvas, warp

FLAT_PERIOD = 1e9


@pytest.fixture
def rows():
    """5×5 canvas, row y colored (40·y + 10, 0, 0, 255)."""
    canvas = Canvas.create(5, 5)
    for y in range(5):
        canvas.fill_rect(0, y, 5, 1, (40 * y + 10, 0, 0, 255))
    return canvas


def row_reds(canvas):
    return [int(canvas.pixels[y, 0, 0]) for y in range(canvas.height)]


def test_zero_amplitude_identity(rows):
    before = rows.pixels.copy()
    out = warp(rows, 0.0, 200.0)
    assert out is rows
    assert np.array_equal(before, rows.pixels)


@pytest.mark.parametrize("period", [0, -5.0])
def test_invalid_period(rows, period):
    with pytest.raises(ValueError):
        warp(rows, 2.0, period)


def test_shift_up_snapshot(rows):
    """Rows read two rows below; the last two rows have no source."""
    warp(rows, 2.0, FLAT_PERIOD)
    assert row_reds(rows) == [90, 130, 170, 130, 170]


def test_shift_down_snapshot_vs_legacy(rows):
    snap = rows.copy()
    live = rows.copy()

    warp(snap, -2.0, FLAT_PERIOD, snapshot=True)
    warp(live, -2.0, FLAT_PERIOD, snapshot=False)

    assert row_reds(snap) == [10, 50, 10, 50, 90]
    # In-place: row 4 reads row 2 after row 2 already took row 0
    assert row_reds(live) == [10, 50, 10, 50, 10]


def test_transparent_samples_skipped(rows):
    rows.fill_rect(0, 0, 5, 1, (0, 0, 0, 0))
    warp(rows, -2.0, FLAT_PERIOD)
    # Row 2 would read the transparent row 0, so it keeps its own color
    assert row_reds(rows)[2] == 90
    assert int(rows.pixels[2, 0, 3]) == 255
    assert row_reds(rows)[3] == 50


def test_transparent_canvas_unchanged():
    canvas = Canvas.create(30, 20)
    warp(canvas, 3.0, 200.0)
    assert not canvas.pixels.any()


def test_warp_moves_pixels():
    canvas = Canvas.create(40, 40)
    canvas.fill_rect(10, 10, 20, 20, (0, 0, 0, 255))
    before = canvas.pixels.copy()
    warp(canvas, 4.0, 30.0)
    assert not np.array_equal(before, canvas.pixels)


@pytest.mark.parametrize("snapshot", [True, False])
def test_fractional_amplitude_rounds_half_up(rows, snapshot):
    """1.6 px moves by two rows in both modes, not one."""
    warp(rows, 1.6, FLAT_PERIOD, snapshot=snapshot)
    assert row_reds(rows) == [90, 130, 170, 130, 170]
