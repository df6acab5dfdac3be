"""Monitor map using Gtk.DrawingArea + Cairo."""

from __future__ import annotations

import logging
import math

import gi
gi.require_version("Gtk", "4.0")
from gi.repository import Gtk, GObject

from .layout import compute_bounds, geometry
from .models import LayoutError, Monitor, MonitorCanvas
from .session import Mode, Session

log = logging.getLogger(__name__)

# Colors
COLOR_BG = (0.12, 0.12, 0.14)
COLOR_ORIGIN = (0.24, 0.24, 0.27)
COLOR_MONITOR = (0.22, 0.24, 0.28)
COLOR_MONITOR_BORDER = (0.26, 0.52, 0.96)
COLOR_SELECTED = (0.96, 0.80, 0.20)
COLOR_SELECTED_FILL = (0.32, 0.29, 0.16)
COLOR_MOVE_FRAME = (0.96, 0.80, 0.20)
COLOR_TEXT = (0.9, 0.9, 0.92)
COLOR_TEXT_DIM = (0.6, 0.62, 0.64)
COLOR_ERROR = (0.9, 0.35, 0.35)

# Inner padding between the widget edge and the viewport, in screen pixels
PADDING = 12


class MonitorMap(Gtk.DrawingArea):
    """Read-only map of the session's monitors; click to select."""

    __gtype_name__ = "MonitorMap"

    __gsignals__ = {
        "monitor-selected": (GObject.SignalFlags.RUN_FIRST, None, (int,)),
    }

    def __init__(self, session: Session) -> None:
        super().__init__()
        self._session = session
        # Screen transform from the last draw, used for hit testing
        self._zoom: float = 1.0
        self._pan_x: float = 0.0
        self._pan_y: float = 0.0

        self.set_draw_func(self._draw)
        self.set_hexpand(True)
        self.set_vexpand(True)

        click = Gtk.GestureClick()
        click.set_button(1)
        click.connect("pressed", self._on_click_pressed)
        self.add_controller(click)

    def _fit(self, canvas: MonitorCanvas, width: int, height: int) -> None:
        """Scale the viewport into the widget, centred, keeping aspect ratio."""
        avail_w = max(1, width - PADDING * 2)
        avail_h = max(1, height - PADDING * 2)
        self._zoom = min(avail_w / canvas.width, avail_h / canvas.height)
        left, _ = canvas.x_bounds
        bottom, _ = canvas.y_bounds
        self._pan_x = (width - canvas.width * self._zoom) / 2 - left * self._zoom
        self._pan_y = (height - canvas.height * self._zoom) / 2 - bottom * self._zoom

    def _logical_to_screen(self, lx: float, ly: float) -> tuple[float, float]:
        """Convert logical coordinates to screen coordinates."""
        return lx * self._zoom + self._pan_x, ly * self._zoom + self._pan_y

    def _screen_to_logical(self, sx: float, sy: float) -> tuple[float, float]:
        """Convert screen coordinates to logical monitor coordinates."""
        return (sx - self._pan_x) / self._zoom, (sy - self._pan_y) / self._zoom

    def _hit_test(self, sx: float, sy: float) -> int:
        """Return index of the enabled monitor at screen position, or -1."""
        lx, ly = self._screen_to_logical(sx, sy)
        monitors = self._session.monitors
        # Selected monitor is drawn on top, so test it first
        order = [self._session.selected_monitor] + [
            i for i in range(len(monitors) - 1, -1, -1) if i != self._session.selected_monitor
        ]
        for i in order:
            if not 0 <= i < len(monitors) or not monitors[i].enabled:
                continue
            try:
                x, y, w, h = geometry(monitors[i])
            except LayoutError:
                continue
            if x <= lx <= x + w and y <= ly <= y + h:
                return i
        return -1

    # ── Event handlers ───────────────────────────────────────────────

    def _on_click_pressed(self, gesture: Gtk.GestureClick, n_press: int, x: float, y: float) -> None:
        idx = self._hit_test(x, y)
        if idx >= 0 and idx != self._session.selected_monitor:
            self._session.selected_monitor = idx
            self.queue_draw()
            self.emit("monitor-selected", idx)

    # ── Drawing ──────────────────────────────────────────────────────

    def _draw(self, area: Gtk.DrawingArea, cr, width: int, height: int) -> None:
        cr.set_source_rgb(*COLOR_BG)
        cr.paint()

        try:
            canvas = compute_bounds(self._session.monitors)
        except LayoutError as e:
            log.warning("Cannot draw monitor map: %s", e)
            self._draw_message(cr, width, height, str(e))
            return

        self._fit(canvas, width, height)
        self._draw_origin(cr, width, height)

        monitors = self._session.monitors
        selected = self._session.selected_monitor
        # Unselected first so the selection is never hidden
        for i, m in enumerate(monitors):
            if i != selected and m.enabled:
                self._draw_monitor(cr, m, False)
        if 0 <= selected < len(monitors) and monitors[selected].enabled:
            self._draw_monitor(cr, monitors[selected], True)

        if self._session.mode is Mode.MOVE:
            cr.set_source_rgb(*COLOR_MOVE_FRAME)
            cr.set_line_width(3)
            cr.rectangle(1.5, 1.5, width - 3, height - 3)
            cr.stroke()

    def _draw_origin(self, cr, width: int, height: int) -> None:
        """Axis lines through the origin, the default snap target."""
        ox, oy = self._logical_to_screen(0, 0)
        cr.set_source_rgb(*COLOR_ORIGIN)
        cr.set_line_width(1)
        cr.set_dash([4, 4])
        cr.move_to(ox, 0)
        cr.line_to(ox, height)
        cr.move_to(0, oy)
        cr.line_to(width, oy)
        cr.stroke()
        cr.set_dash([])

    def _draw_monitor(self, cr, m: Monitor, selected: bool) -> None:
        x, y, w, h = geometry(m)
        sx, sy = self._logical_to_screen(x, y)
        sw = w * self._zoom
        sh = h * self._zoom

        cr.set_source_rgb(*(COLOR_SELECTED_FILL if selected else COLOR_MONITOR))
        _rounded_rect(cr, sx, sy, sw, sh, 4)
        cr.fill()

        cr.set_source_rgb(*(COLOR_SELECTED if selected else COLOR_MONITOR_BORDER))
        cr.set_line_width(2.5 if selected else 1.0)
        _rounded_rect(cr, sx, sy, sw, sh, 4)
        cr.stroke()

        # Text (only if monitor is big enough)
        if sw > 40 and sh > 20:
            self._draw_monitor_text(cr, m, sx, sy, sw, sh)

    def _draw_monitor_text(self, cr, m: Monitor, sx: float, sy: float, sw: float, sh: float) -> None:
        cr.set_source_rgb(*COLOR_TEXT)

        name = m.name or "?"
        font_size = min(14, max(8, sw / 10))
        cr.set_font_size(font_size)
        extents = cr.text_extents(name)
        cr.move_to(sx + (sw - extents.width) / 2, sy + sh / 2 - 2)
        cr.show_text(name)

        # Position, handy when lining monitors up by hand
        cr.set_source_rgb(*COLOR_TEXT_DIM)
        pos = m.position
        sub = f"{pos.x},{pos.y}  ×{m.effective_scale:g}" if pos else ""
        font_size_small = min(10, max(6, sw / 14))
        cr.set_font_size(font_size_small)
        extents = cr.text_extents(sub)
        ty = sy + sh / 2 + font_size_small + 4
        if ty + 4 < sy + sh:
            cr.move_to(sx + (sw - extents.width) / 2, ty)
            cr.show_text(sub)

    def _draw_message(self, cr, width: int, height: int, text: str) -> None:
        cr.set_source_rgb(*COLOR_ERROR)
        cr.set_font_size(13)
        extents = cr.text_extents(text)
        cr.move_to((width - extents.width) / 2, height / 2)
        cr.show_text(text)


def _rounded_rect(cr, x: float, y: float, w: float, h: float, r: float) -> None:
    """Draw a rounded rectangle path."""
    cr.new_sub_path()
    cr.arc(x + w - r, y + r, r, -math.pi / 2, 0)
    cr.arc(x + w - r, y + h - r, r, 0, math.pi / 2)
    cr.arc(x + r, y + h - r, r, math.pi / 2, math.pi)
    cr.arc(x + r, y + r, r, math.pi, 3 * math.pi / 2)
    cr.close_path()
