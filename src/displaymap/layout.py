"""Layout engine: logical geometry, canvas bounds, snapping and mutations.

All coordinates are logical pixels (physical pixels divided by the
monitor scale).  Nothing here touches the filesystem or the UI; the
session calls these functions in response to key presses and the canvas
calls :func:`compute_bounds` on every redraw.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from .models import (
    Axis,
    InvalidScale,
    Monitor,
    MonitorCanvas,
    NoPosition,
    NoResolvableMode,
    Resolution,
)

log = logging.getLogger(__name__)

# Padding around the bounding box, in logical pixels
CANVAS_MARGIN = 50.0
# Step used by free (non-snapping) movement
FREE_STEP = 10
# Differences at or below this are treated as already aligned
SNAP_TOLERANCE = 0.1


# ── Geometry ─────────────────────────────────────────────────────────────

def resolve_mode(monitor: Monitor) -> Resolution:
    """Return the current mode, falling back to the preferred one."""
    mode = monitor.current_mode or monitor.preferred_mode
    if mode is None:
        raise NoResolvableMode(monitor.name)
    return mode


def logical_extent(monitor: Monitor) -> tuple[float, float]:
    """Width and height in logical pixels (accounting for scale and rotation)."""
    mode = resolve_mode(monitor)
    w, h = mode.width, mode.height
    if monitor.effective_transform.is_rotated:
        w, h = h, w
    scale = monitor.effective_scale
    if scale <= 0:
        raise InvalidScale(scale)
    return w / scale, h / scale


def geometry(
    monitor: Monitor, tolerate_missing_mode: bool = False,
) -> tuple[float, float, float, float]:
    """Return ``(x, y, logical_width, logical_height)``.

    With *tolerate_missing_mode* a monitor without any usable mode
    degrades to an empty rectangle at the origin instead of raising.
    """
    if monitor.position is None:
        raise NoPosition(monitor.name)
    try:
        w, h = logical_extent(monitor)
    except NoResolvableMode:
        if tolerate_missing_mode:
            return 0.0, 0.0, 0.0, 0.0
        raise
    return float(monitor.position.x), float(monitor.position.y), w, h


# ── Canvas bounds ────────────────────────────────────────────────────────

def compute_bounds(monitors: Iterable[Monitor], margin: float = CANVAS_MARGIN) -> MonitorCanvas:
    """Bounding viewport of all enabled monitors, padded by *margin*."""
    left = bottom = math.inf
    right = top = -math.inf

    for m in monitors:
        if not m.enabled:
            continue
        x, y, w, h = geometry(m)
        left = min(left, x)
        right = max(right, x + w)
        bottom = min(bottom, y)
        top = max(top, y + h)

    # Nothing enabled: collapse onto the origin
    if left == math.inf:
        left = bottom = right = top = 0.0

    left -= margin
    bottom -= margin
    right += margin
    top += margin

    offset_y = -bottom if bottom < 0 else 0.0

    return MonitorCanvas(
        top=int(top),
        offset_y=int(offset_y),
        x_bounds=(left, right),
        y_bounds=(bottom, top),
    )


# ── Snapping ─────────────────────────────────────────────────────────────

def _span(rect: tuple[float, float, float, float], axis: Axis) -> tuple[float, float]:
    x, y, w, h = rect
    if axis is Axis.HORIZONTAL:
        return x, w
    return y, h


def _anchors(start: float, extent: float) -> tuple[float, float, float]:
    """Near edge, far edge, center."""
    return start, start + extent, start + extent / 2


def snap_targets(selected: Monitor, others: Iterable[Monitor], axis: Axis) -> list[float]:
    """Alignment lines on *axis*: the origin plus every enabled neighbour's anchors."""
    targets = [0.0]
    for other in others:
        if other is selected or not other.enabled:
            continue
        try:
            rect = geometry(other, tolerate_missing_mode=True)
        except NoPosition:
            log.debug("Skipping %s as snap target: no position", other.name)
            continue
        targets.extend(_anchors(*_span(rect, axis)))
    return targets


def snap(
    selected: Monitor,
    others: Iterable[Monitor],
    axis: Axis,
    direction: int,
) -> int | None:
    """Smallest move along *axis* in *direction* that aligns an anchor.

    Anchors are the near edge, far edge and center of the selected
    monitor; targets are the origin and the anchors of every other
    enabled monitor.  Returns the rounded displacement, or None when
    nothing lies in that direction.  Equal distances keep the first
    candidate found (edges before center, near before far).
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or 1, got {direction!r}")

    sources = _anchors(*_span(geometry(selected), axis))
    targets = snap_targets(selected, others, axis)

    best: float | None = None
    for s in sources:
        for t in targets:
            diff = t - s
            if direction < 0 and diff >= -SNAP_TOLERANCE:
                continue
            if direction > 0 and diff <= SNAP_TOLERANCE:
                continue
            if best is None or abs(diff) < abs(best):
                best = diff

    if best is None:
        return None
    # Halves round away from zero
    return int(math.copysign(math.floor(abs(best) + 0.5), best))


# ── Mutations ────────────────────────────────────────────────────────────

def move_by(monitor: Monitor, axis: Axis, delta: int) -> None:
    """Translate *monitor* by *delta* logical pixels along *axis*."""
    if monitor.position is None:
        raise NoPosition(monitor.name)
    if axis is Axis.HORIZONTAL:
        monitor.position.x += delta
    else:
        monitor.position.y += delta


def set_current_mode(monitor: Monitor, index: int) -> bool:
    """Make ``modes[index]`` the only current mode.

    An out-of-range index is reported and leaves the monitor untouched.
    """
    if not 0 <= index < len(monitor.modes):
        log.warning("%s: mode index %d out of range (%d modes)", monitor.name, index, len(monitor.modes))
        return False
    monitor.current = index
    return True


def set_scale(monitor: Monitor, value: float) -> None:
    if value <= 0:
        raise InvalidScale(value)
    monitor.scale = value
