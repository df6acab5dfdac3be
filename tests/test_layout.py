"""Tests for geometry, canvas bounds, snapping and mutations."""

import math

import pytest

from conftest import make_monitor
from displaymap.layout import (
    CANVAS_MARGIN,
    FREE_STEP,
    compute_bounds,
    geometry,
    logical_extent,
    move_by,
    resolve_mode,
    set_current_mode,
    set_scale,
    snap,
    snap_targets,
)
from displaymap.models import (
    Axis,
    InvalidScale,
    Monitor,
    NoPosition,
    NoResolvableMode,
    Position,
    Resolution,
    Transform,
)


# ── Geometry ─────────────────────────────────────────────────────────────

def test_resolve_mode_prefers_current():
    m = Monitor(
        name="DP-1",
        modes=[Resolution(1920, 1080, preferred=True), Resolution(1280, 720)],
        current=1,
    )
    assert resolve_mode(m) is m.modes[1]


def test_resolve_mode_falls_back_to_preferred():
    m = Monitor(
        name="DP-1",
        modes=[Resolution(1280, 720), Resolution(1920, 1080, preferred=True)],
    )
    assert resolve_mode(m) is m.modes[1]


def test_resolve_mode_without_current_or_preferred():
    m = Monitor(name="DP-1", modes=[Resolution(1280, 720)])
    with pytest.raises(NoResolvableMode):
        resolve_mode(m)


@pytest.mark.parametrize("transform", [
    Transform.ROTATE_90, Transform.ROTATE_270, Transform.FLIPPED_90, Transform.FLIPPED_270,
])
def test_logical_extent_swaps_for_quarter_turns(transform):
    upright = make_monitor("DP-1", width=1920, height=1080)
    rotated = make_monitor("DP-1", width=1920, height=1080, transform=transform)
    w, h = logical_extent(upright)
    assert logical_extent(rotated) == (h, w)


@pytest.mark.parametrize("transform", [Transform.NORMAL, Transform.ROTATE_180, Transform.FLIPPED])
def test_logical_extent_keeps_orientation(transform):
    m = make_monitor("DP-1", width=1920, height=1080, transform=transform)
    assert logical_extent(m) == (1920, 1080)


def test_logical_extent_divides_by_scale():
    m = make_monitor("DP-1", width=1920, height=1080, scale=1.5, transform=Transform.ROTATE_90)
    assert logical_extent(m) == pytest.approx((720, 1280))


def test_logical_extent_missing_scale_is_one():
    m = make_monitor("DP-1", width=2560, height=1440, scale=None)
    assert logical_extent(m) == (2560, 1440)


def test_logical_extent_rejects_non_positive_scale():
    m = make_monitor("DP-1", scale=0.0)
    with pytest.raises(InvalidScale):
        logical_extent(m)


def test_geometry_requires_position():
    m = make_monitor("DP-1", x=None, y=None)
    with pytest.raises(NoPosition):
        geometry(m)


def test_geometry_degraded_when_tolerated():
    m = Monitor(name="DP-1", modes=[], position=Position(300, 400))
    assert geometry(m, tolerate_missing_mode=True) == (0, 0, 0, 0)
    with pytest.raises(NoResolvableMode):
        geometry(m)


# ── Canvas bounds ────────────────────────────────────────────────────────

def test_bounds_two_monitors():
    monitors = [make_monitor("A", 0, 0), make_monitor("B", 200, 0)]
    canvas = compute_bounds(monitors)
    assert canvas.x_bounds == (-50, 350)
    assert canvas.y_bounds == (-50, 150)
    assert canvas.top == 150
    assert canvas.offset_y == 50


def test_bounds_ignore_disabled_monitors():
    monitors = [make_monitor("A", 0, 0), make_monitor("B", 5000, 5000, enabled=False)]
    canvas = compute_bounds(monitors)
    assert canvas.x_bounds == (-50, 150)
    assert canvas.y_bounds == (-50, 150)


def test_bounds_negative_layout_sets_offset():
    canvas = compute_bounds([make_monitor("A", -300, -200)])
    assert canvas.y_bounds == (-250, -50)
    assert canvas.offset_y == 250


def test_bounds_above_origin_has_no_offset():
    canvas = compute_bounds([make_monitor("A", 0, 100)])
    assert canvas.y_bounds == (50, 250)
    assert canvas.offset_y == 0


def test_bounds_use_logical_size():
    canvas = compute_bounds([make_monitor("A", 0, 0, 3840, 2160, scale=2.0)])
    assert canvas.x_bounds == (-50, 1970)
    assert canvas.top == 1130


def test_bounds_empty_is_finite():
    for monitors in ([], [make_monitor("A", enabled=False)]):
        canvas = compute_bounds(monitors)
        assert all(math.isfinite(v) for v in canvas.x_bounds + canvas.y_bounds)
        assert canvas.x_bounds == (-CANVAS_MARGIN, CANVAS_MARGIN)
        assert canvas.y_bounds == (-CANVAS_MARGIN, CANVAS_MARGIN)
        assert canvas.top == 50
        assert canvas.width > 0 and canvas.height > 0


def test_bounds_fail_on_enabled_monitor_without_mode():
    m = Monitor(name="A", enabled=True, modes=[], position=Position(0, 0))
    with pytest.raises(NoResolvableMode):
        compute_bounds([m])


# ── Snapping ─────────────────────────────────────────────────────────────

def test_snap_left_to_neighbour_edge():
    a = make_monitor("A", 0, 0)
    b = make_monitor("B", 200, 0)
    delta = snap(b, [a, b], Axis.HORIZONTAL, -1)
    assert delta == -100
    move_by(b, Axis.HORIZONTAL, delta)
    assert b.position.x == 100


def test_snap_single_monitor_to_origin():
    m = make_monitor("A", 0, 100)
    delta = snap(m, [m], Axis.VERTICAL, -1)
    assert delta == -100
    move_by(m, Axis.VERTICAL, delta)
    assert m.position.y == 0


def test_snap_does_not_repeat_same_target():
    a = make_monitor("A", 0, 0)
    b = make_monitor("B", 200, 0)
    move_by(b, Axis.HORIZONTAL, snap(b, [a, b], Axis.HORIZONTAL, -1))

    # B's left edge now sits on A's right edge; the next snap goes further
    second = snap(b, [a, b], Axis.HORIZONTAL, -1)
    assert second is not None
    assert second < 0
    assert b.position.x + second != 100


def test_snap_nothing_in_direction():
    right_of_origin = make_monitor("A", 0, 0)
    assert snap(right_of_origin, [right_of_origin], Axis.HORIZONTAL, 1) is None
    # The center still lies past the origin on the left
    assert snap(right_of_origin, [right_of_origin], Axis.HORIZONTAL, -1) == -50

    left_of_origin = make_monitor("B", -100, 0)
    assert snap(left_of_origin, [left_of_origin], Axis.HORIZONTAL, -1) is None
    assert snap(left_of_origin, [left_of_origin], Axis.HORIZONTAL, 1) == 50


def test_snap_ignores_disabled_neighbours():
    a = make_monitor("A", 0, 0)
    off = make_monitor("OFF", 150, 0, enabled=False)
    b = make_monitor("B", 200, 0)
    assert snap(b, [a, off, b], Axis.HORIZONTAL, -1) == -100


def test_snap_targets_skip_neighbour_without_position():
    a = make_monitor("A", 0, 0)
    lost = make_monitor("LOST", None, None)
    assert snap_targets(a, [a, lost], Axis.VERTICAL) == [0.0]


def test_snap_targets_include_center():
    a = make_monitor("A", 0, 0)
    b = make_monitor("B", 200, 40, 100, 60)
    assert snap_targets(a, [a, b], Axis.VERTICAL) == [0.0, 40, 100, 70]


def test_snap_to_center_alignment():
    a = make_monitor("A", 0, 0, 100, 200)
    b = make_monitor("B", 100, 30, 100, 100)
    # B's center (80) reaches A's center (100) before any edge lines up
    assert snap(b, [a, b], Axis.VERTICAL, 1) == 20


def test_snap_rounds_to_integer():
    a = make_monitor("A", 0, 0, 1920, 1080, scale=1.5)    # 1280 x 720 logical
    b = make_monitor("B", 1300, 0)
    assert snap(b, [a, b], Axis.HORIZONTAL, -1) == -20
    c = make_monitor("C", 0, 0, 1001, 100)
    d = make_monitor("D", 701, 0, 100, 100)
    # D's left edge is 200.5 past C's center; halves round away from zero
    assert snap(d, [c, d], Axis.HORIZONTAL, -1) == -201


def test_snap_acting_monitor_without_position():
    a = make_monitor("A", 0, 0)
    lost = make_monitor("LOST", None, None)
    with pytest.raises(NoPosition):
        snap(lost, [a, lost], Axis.HORIZONTAL, 1)


def test_snap_rejects_bad_direction():
    a = make_monitor("A", 0, 0)
    with pytest.raises(ValueError):
        snap(a, [a], Axis.HORIZONTAL, 0)


@pytest.mark.parametrize("axis", [Axis.HORIZONTAL, Axis.VERTICAL])
@pytest.mark.parametrize("direction", [-1, 1])
def test_snap_is_minimal(axis, direction):
    monitors = [
        make_monitor("A", 0, 0, 1920, 1080),
        make_monitor("B", 1920, -217, 2560, 1440, scale=1.25),
        make_monitor("C", -1080, 333, 1920, 1080, transform=Transform.ROTATE_90),
        make_monitor("D", 517, 1080, 1280, 1024),
    ]
    selected = monitors[3]

    def anchors(m):
        x, y, w, h = geometry(m)
        start, extent = (x, w) if axis is Axis.HORIZONTAL else (y, h)
        return [start, start + extent, start + extent / 2]

    targets = [0.0] + [t for m in monitors if m is not selected for t in anchors(m)]
    valid = [
        t - s for s in anchors(selected) for t in targets
        if (t - s < -0.1 if direction < 0 else t - s > 0.1)
    ]

    delta = snap(selected, monitors, axis, direction)
    assert valid
    assert delta == pytest.approx(min(valid, key=abs), abs=0.5)
    assert delta * direction > 0


# ── Mutations ────────────────────────────────────────────────────────────

@pytest.mark.parametrize("axis", [Axis.HORIZONTAL, Axis.VERTICAL])
def test_free_move_is_reversible(axis):
    m = make_monitor("A", 37, -12)
    for _ in range(5):
        move_by(m, axis, FREE_STEP)
    for _ in range(5):
        move_by(m, axis, -FREE_STEP)
    assert m.position == Position(37, -12)


def test_move_without_position():
    m = make_monitor("A", None, None)
    with pytest.raises(NoPosition):
        move_by(m, Axis.VERTICAL, 10)


def test_set_current_mode_single_current(test_monitors):
    m = test_monitors[0]
    assert set_current_mode(m, 1)
    assert m.current == 1
    assert m.current_mode is m.modes[1]
    assert logical_extent(m) == (1280, 720)


def test_set_current_mode_out_of_range_keeps_previous(test_monitors, caplog):
    m = test_monitors[0]
    assert not set_current_mode(m, 5)
    assert not set_current_mode(m, -1)
    assert m.current == 0
    assert "out of range" in caplog.text


def test_set_scale():
    m = make_monitor("A")
    set_scale(m, 1.25)
    assert m.scale == 1.25
    for bad in (0, -1.0):
        with pytest.raises(InvalidScale):
            set_scale(m, bad)
    assert m.scale == 1.25
