"""Saved layout: positions and scales of monitors, keyed by name."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import Monitor, MonitorState, Position
from .utils import read_json, state_path, write_json

log = logging.getLogger(__name__)


class StateManager:
    """Reads and writes the monitor state JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or state_path()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, monitors: list[Monitor]) -> Path:
        """Save the adjustable fields of every monitor. Returns the file path."""
        data = [MonitorState.from_monitor(m).to_dict() for m in monitors]
        write_json(self._path, data)
        return self._path

    def load(self) -> list[MonitorState] | None:
        """Load saved states; None when there is no usable file."""
        data = read_json(self._path)
        if data is None:
            return None
        if not isinstance(data, list):
            log.warning("Ignoring %s: expected a JSON array", self._path)
            return None
        try:
            return [MonitorState.from_dict(d) for d in data if isinstance(d, dict)]
        except (ValueError, TypeError, AttributeError) as e:
            log.warning("Ignoring %s: malformed record: %s", self._path, e)
            return None


def apply_saved_state(monitors: list[Monitor], states: list[MonitorState]) -> int:
    """Overlay saved positions and scales onto discovered monitors.

    Matching is by name; monitors without a saved entry keep what was
    discovered.  Returns the number of monitors updated.
    """
    by_name = {s.name: s for s in states}
    updated = 0
    for m in monitors:
        saved = by_name.get(m.name)
        if saved is None:
            continue
        changed = False
        if saved.position is not None:
            m.position = Position(saved.position.x, saved.position.y)
            changed = True
        if saved.scale is not None:
            if saved.scale > 0:
                m.scale = saved.scale
                changed = True
            else:
                log.warning("%s: ignoring saved scale %r", m.name, saved.scale)
        if changed:
            updated += 1
    return updated
