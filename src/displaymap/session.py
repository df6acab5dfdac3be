"""Editing session: the monitor list, the UI mode and key dispatch.

Keys are GDK key names (``"k"``, ``"K"``, ``"Up"``, ``"Escape"``,
``"space"``...) so the session can be driven without a display.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from .hyprland import save_hyprland_config
from .layout import FREE_STEP, move_by, set_current_mode, set_scale
from .layout import snap as snap_delta
from .models import Axis, IndexOutOfRange, LayoutError, Monitor
from .state_manager import StateManager, apply_saved_state
from .utils import Configuration
from .wlr_randr import get_monitors

log = logging.getLogger(__name__)

SCALE_OPTIONS = (0.5, 0.75, 1.0, 1.25, 1.5, 1.75, 2.0)


class Mode(Enum):
    VIEW = "view"
    MOVE = "move"
    RESOLUTION = "resolution"
    SCALE = "scale"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# (axis, direction) for the snapping keys; uppercase variants free-move
_MOVE_KEYS: dict[str, tuple[Axis, int]] = {
    "k": (Axis.VERTICAL, -1),
    "Up": (Axis.VERTICAL, -1),
    "j": (Axis.VERTICAL, 1),
    "Down": (Axis.VERTICAL, 1),
    "h": (Axis.HORIZONTAL, -1),
    "Left": (Axis.HORIZONTAL, -1),
    "l": (Axis.HORIZONTAL, 1),
    "Right": (Axis.HORIZONTAL, 1),
}
_ARROWS = ("Up", "Down", "Left", "Right")


def scale_option(index: int) -> float:
    if not 0 <= index < len(SCALE_OPTIONS):
        raise IndexOutOfRange(index, len(SCALE_OPTIONS))
    return SCALE_OPTIONS[index]


class Session:
    """Owns the monitor list for the lifetime of the editor."""

    def __init__(
        self,
        monitors: list[Monitor],
        config: Configuration | None = None,
        state_manager: StateManager | None = None,
    ) -> None:
        self.monitors = monitors
        self.config = config or Configuration()
        self._state = state_manager or StateManager()
        self.selected_monitor: int = 0
        self.selected_resolution: int = 0
        self.selected_scale: int = 0
        self.mode: Mode = Mode.VIEW
        self.exit: bool = False
        self.message: str = ""

    @classmethod
    def load(
        cls,
        config: Configuration,
        state_manager: StateManager | None = None,
        discover: Callable[[], list[Monitor]] = get_monitors,
    ) -> Session:
        """Discover monitors and overlay the saved layout."""
        state_manager = state_manager or StateManager()
        monitors = discover()
        saved = state_manager.load()
        if saved:
            n = apply_saved_state(monitors, saved)
            log.info("Restored saved layout for %d monitor(s)", n)
        return cls(monitors, config, state_manager)

    @property
    def selected(self) -> Monitor | None:
        if not 0 <= self.selected_monitor < len(self.monitors):
            return None
        return self.monitors[self.selected_monitor]

    # ── Key dispatch ─────────────────────────────────────────────────

    def handle_key(self, key: str, shift: bool = False) -> None:
        if key == "q":
            self.quit()
            return
        if key == "w":
            self.write()
            return

        if self.mode is Mode.VIEW:
            self._handle_view(key)
        elif self.mode is Mode.MOVE:
            self._handle_move(key, shift)
        elif self.mode is Mode.RESOLUTION:
            self._handle_resolution(key)
        elif self.mode is Mode.SCALE:
            self._handle_scale(key)

    def _handle_view(self, key: str) -> None:
        if key in ("k", "Up"):
            self.selected_monitor = _wrap(self.selected_monitor + 1, len(self.monitors))
        elif key in ("j", "Down"):
            self.selected_monitor = _wrap(self.selected_monitor - 1, len(self.monitors))
        elif key == "m":
            self.change_mode(Mode.MOVE)
        elif key == "r":
            self.change_mode(Mode.RESOLUTION)
        elif key == "s":
            self.change_mode(Mode.SCALE)

    def _handle_move(self, key: str, shift: bool) -> None:
        if key == "Escape":
            self.change_mode(Mode.VIEW)
            return

        free = (len(key) == 1 and key.isupper()) or (shift and key in _ARROWS)
        binding = _MOVE_KEYS.get(key.lower() if len(key) == 1 else key)
        if binding is None:
            return
        axis, direction = binding
        if free:
            self.move(axis, direction * FREE_STEP)
        else:
            self.snap(axis, direction)

    def _handle_resolution(self, key: str) -> None:
        monitor = self.selected
        count = len(monitor.modes) if monitor else 0
        if key in ("j", "Down"):
            self.selected_resolution = _wrap(self.selected_resolution + 1, count)
        elif key in ("k", "Up"):
            self.selected_resolution = _wrap(self.selected_resolution - 1, count)
        elif key == "space":
            self.apply_resolution(self.selected_resolution)
        elif key == "Escape":
            self.change_mode(Mode.VIEW)

    def _handle_scale(self, key: str) -> None:
        if key in ("j", "Down"):
            self.selected_scale = _wrap(self.selected_scale + 1, len(SCALE_OPTIONS))
        elif key in ("k", "Up"):
            self.selected_scale = _wrap(self.selected_scale - 1, len(SCALE_OPTIONS))
        elif key == "space":
            self.apply_scale(self.selected_scale)
        elif key == "Escape":
            self.change_mode(Mode.VIEW)

    # ── Actions ──────────────────────────────────────────────────────

    def change_mode(self, mode: Mode) -> None:
        # Leaving move mode persists the layout
        if self.mode is Mode.MOVE and mode is not Mode.MOVE:
            self.save_state()

        monitor = self.selected
        if mode is Mode.RESOLUTION and monitor is not None:
            self.selected_resolution = _active_mode_index(monitor)
        elif mode is Mode.SCALE and monitor is not None:
            scale = monitor.effective_scale
            if scale in SCALE_OPTIONS:
                self.selected_scale = SCALE_OPTIONS.index(scale)
        self.mode = mode

    def move(self, axis: Axis, delta: int) -> None:
        """Free movement: translate by *delta* regardless of neighbours."""
        monitor = self.selected
        if monitor is None:
            return
        try:
            move_by(monitor, axis, delta)
        except LayoutError as e:
            self._refuse(e)

    def snap(self, axis: Axis, direction: int) -> None:
        """Move the selected monitor to the nearest alignment in *direction*."""
        monitor = self.selected
        if monitor is None:
            return
        try:
            delta = snap_delta(monitor, self.monitors, axis, direction)
            if delta is None:
                self.message = "Nothing to snap to"
                return
            move_by(monitor, axis, delta)
        except LayoutError as e:
            self._refuse(e)

    def apply_resolution(self, index: int) -> None:
        monitor = self.selected
        if monitor is None:
            return
        if set_current_mode(monitor, index):
            mode = monitor.modes[index]
            self.message = f"{monitor.name}: {mode.label}"
        else:
            self.message = str(IndexOutOfRange(index, len(monitor.modes)))

    def apply_scale(self, index: int) -> None:
        monitor = self.selected
        if monitor is None:
            return
        try:
            set_scale(monitor, scale_option(index))
        except LayoutError as e:
            self._refuse(e)
            return
        self.message = f"{monitor.name}: scale {monitor.scale:g}"

    def save_state(self) -> bool:
        try:
            self._state.save(self.monitors)
        except OSError as e:
            log.error("Failed to save monitor state: %s", e)
            self.message = f"Failed to save monitor state: {e}"
            return False
        return True

    def write(self) -> bool:
        """Write the Hyprland config and the saved state."""
        try:
            path = save_hyprland_config(self.config.monitors_config_path, self.monitors)
        except (OSError, LayoutError) as e:
            log.error("Failed to save Hyprland config: %s", e)
            self.message = f"Failed to save Hyprland config: {e}"
            return False
        if not self.save_state():
            return False
        self.message = f"Saved {path}"
        return True

    def quit(self) -> None:
        self.save_state()
        self.exit = True

    def _refuse(self, error: Exception) -> None:
        log.warning("%s", error)
        self.message = str(error)


def _active_mode_index(monitor: Monitor) -> int:
    """Index of the mode the monitor runs in: current, else preferred, else 0."""
    if monitor.current_mode is not None:
        return monitor.current
    for i, mode in enumerate(monitor.modes):
        if mode.preferred:
            return i
    return 0


def _wrap(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return index % count
