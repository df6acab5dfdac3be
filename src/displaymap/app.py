"""Application entry point."""

from __future__ import annotations

import logging
import sys

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Adw, Gio

from .session import Session
from .utils import APP_ID, ConfigError, Configuration

log = logging.getLogger(__name__)


class MonitorApp(Adw.Application):
    """Main application class."""

    def __init__(self, session: Session) -> None:
        super().__init__(
            application_id=APP_ID,
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS,
        )
        self._session = session

    def do_activate(self) -> None:
        win = self.get_active_window()
        if win is None:
            from .window import MainWindow
            win = MainWindow(self, self._session)
        win.present()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [displaymap] %(levelname)s %(message)s",
    )
    try:
        config = Configuration.get()
    except ConfigError as e:
        log.error("%s", e)
        sys.exit(1)

    app = MonitorApp(Session.load(config))
    sys.exit(app.run(sys.argv))
