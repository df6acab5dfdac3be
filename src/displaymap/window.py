"""Main application window."""

from __future__ import annotations

import logging

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Gtk, Gdk, Adw, Gio

from .canvas import MonitorMap
from .layout import resolve_mode
from .models import LayoutError, Monitor
from .session import SCALE_OPTIONS, Mode, Session

log = logging.getLogger(__name__)

KEY_HELP = {
    Mode.VIEW: "j/k select · m move · r resolution · s scale · w save · q quit",
    Mode.MOVE: "h/j/k/l snap · H/J/K/L move 10px · Esc done",
    Mode.RESOLUTION: "j/k choose · Space apply · Esc done",
    Mode.SCALE: "j/k choose · Space apply · Esc done",
}


def _monitor_subtitle(m: Monitor) -> str:
    if not m.enabled:
        return "disabled"
    try:
        mode = resolve_mode(m)
    except LayoutError:
        return "no usable mode"
    pos = f"{m.position.x},{m.position.y}" if m.position else "?"
    rot = m.effective_transform.degrees
    parts = [mode.label, f"at {pos}", f"scale {m.effective_scale:g}"]
    if rot:
        parts.append(f"{rot}°")
    return " · ".join(parts)


class MainWindow(Adw.ApplicationWindow):
    """Window with the monitor map, monitor list and mode side panel."""

    __gtype_name__ = "MainWindow"

    def __init__(self, app: Adw.Application, session: Session) -> None:
        super().__init__(application=app, title="Display Map", default_width=1100, default_height=700)
        self._session = session

        self._build_ui()
        self._setup_actions()
        self._refresh()
        self.connect("close-request", self._on_close_request)

    # ── UI Construction ──────────────────────────────────────────────

    def _build_ui(self) -> None:
        main_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        self.set_content(main_box)

        header = Adw.HeaderBar()
        self._title = Adw.WindowTitle(title="Display Map", subtitle="View")
        header.set_title_widget(self._title)
        main_box.append(header)

        btn_save = Gtk.Button(label="Save", tooltip_text="Write monitors.conf (w)")
        btn_save.add_css_class("suggested-action")
        btn_save.connect("clicked", self._on_save_clicked)
        header.pack_end(btn_save)

        # Split view: map + mode panel
        self._split = Adw.OverlaySplitView()
        self._split.set_collapsed(False)
        self._split.set_sidebar_position(Gtk.PackType.END)
        self._split.set_max_sidebar_width(320)
        self._split.set_min_sidebar_width(220)
        self._split.set_vexpand(True)

        self._map = MonitorMap(self._session)
        self._map.connect("monitor-selected", self._on_monitor_selected)
        self._split.set_content(self._map)

        scroll = Gtk.ScrolledWindow()
        scroll.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        self._options = Gtk.ListBox()
        self._options.add_css_class("navigation-sidebar")
        self._options.set_selection_mode(Gtk.SelectionMode.SINGLE)
        self._options.set_can_focus(False)
        scroll.set_child(self._options)
        self._split.set_sidebar(scroll)

        main_box.append(self._split)

        # Monitor list
        self._monitor_list = Gtk.ListBox()
        self._monitor_list.add_css_class("boxed-list")
        self._monitor_list.set_selection_mode(Gtk.SelectionMode.SINGLE)
        self._monitor_list.set_can_focus(False)
        self._monitor_list.set_margin_start(12)
        self._monitor_list.set_margin_end(12)
        self._monitor_list.set_margin_top(6)
        self._monitor_list.connect("row-activated", self._on_monitor_row_activated)
        main_box.append(self._monitor_list)

        # Status bar
        self._status = Gtk.Label(label="Ready", xalign=0)
        self._status.set_margin_start(12)
        self._status.set_margin_end(12)
        self._status.set_margin_top(4)
        self._status.set_margin_bottom(4)
        self._status.add_css_class("dim-label")
        main_box.append(self._status)

        keys = Gtk.EventControllerKey()
        keys.set_propagation_phase(Gtk.PropagationPhase.CAPTURE)
        keys.connect("key-pressed", self._on_key_pressed)
        self.add_controller(keys)

    def _setup_actions(self) -> None:
        """Set up keyboard shortcuts."""
        action_save = Gio.SimpleAction(name="save")
        action_save.connect("activate", lambda *_: self._on_save_clicked(None))
        self.add_action(action_save)

        app = self.get_application()
        app.set_accels_for_action("win.save", ["<Control>s"])

    # ── Refresh ──────────────────────────────────────────────────────

    def _refresh(self) -> None:
        """Sync every widget with the session after an action."""
        session = self._session
        self._title.set_subtitle(session.mode.label)
        self._rebuild_monitor_list()
        self._rebuild_options()
        self._status.set_label(session.message or KEY_HELP[session.mode])
        self._map.queue_draw()

    def _rebuild_monitor_list(self) -> None:
        self._monitor_list.remove_all()
        for m in self._session.monitors:
            row = Adw.ActionRow(title=m.display_name, subtitle=_monitor_subtitle(m))
            row.set_activatable(True)
            self._monitor_list.append(row)
        row = self._monitor_list.get_row_at_index(self._session.selected_monitor)
        if row is not None:
            self._monitor_list.select_row(row)

    def _rebuild_options(self) -> None:
        """Fill the side panel with modes or scale options for the current mode."""
        self._options.remove_all()
        session = self._session
        monitor = session.selected

        if session.mode is Mode.RESOLUTION and monitor is not None:
            labels = []
            for i, mode in enumerate(monitor.modes):
                marks = []
                if i == monitor.current:
                    marks.append("current")
                if mode.preferred:
                    marks.append("preferred")
                suffix = f"  ({', '.join(marks)})" if marks else ""
                labels.append(mode.label + suffix)
            cursor = session.selected_resolution
        elif session.mode is Mode.SCALE and monitor is not None:
            labels = [f"{s:g}" for s in SCALE_OPTIONS]
            cursor = session.selected_scale
        else:
            self._split.set_show_sidebar(False)
            return

        for label in labels:
            self._options.append(Gtk.Label(label=label, xalign=0))
        row = self._options.get_row_at_index(cursor)
        if row is not None:
            self._options.select_row(row)
        self._split.set_show_sidebar(True)

    # ── Event handlers ───────────────────────────────────────────────

    def _on_key_pressed(self, controller: Gtk.EventControllerKey, keyval: int, keycode: int, state: Gdk.ModifierType) -> bool:
        if state & Gdk.ModifierType.CONTROL_MASK:
            return False  # leave Ctrl shortcuts to the application
        name = Gdk.keyval_name(keyval)
        if not name:
            return False
        shift = bool(state & Gdk.ModifierType.SHIFT_MASK)
        self._session.message = ""
        self._session.handle_key(name, shift)
        if self._session.exit:
            self.close()
            return True
        self._refresh()
        return True

    def _on_save_clicked(self, button: Gtk.Button | None) -> None:
        self._session.write()
        self._refresh()

    def _on_monitor_selected(self, canvas: MonitorMap, index: int) -> None:
        self._refresh()

    def _on_monitor_row_activated(self, listbox: Gtk.ListBox, row: Gtk.ListBoxRow) -> None:
        self._session.selected_monitor = row.get_index()
        self._refresh()

    def _on_close_request(self, window: Gtk.Window) -> bool:
        # Closing the window counts as quitting: persist the layout
        if not self._session.exit:
            self._session.quit()
        return False
