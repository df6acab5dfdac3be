"""Hyprland config export: one ``monitor = ...`` line per output."""

from __future__ import annotations

import logging
from pathlib import Path

from .layout import resolve_mode
from .models import Monitor, NoPosition
from .utils import expand_path, write_text

log = logging.getLogger(__name__)


def _fmt_number(value: float) -> str:
    """Print whole numbers without a trailing ``.0`` (60, 1, 1.5, 59.951)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def export_line(monitor: Monitor) -> str:
    """Generate the ``monitor = ...`` config line for monitors.conf."""
    if not monitor.enabled:
        return f"monitor = {monitor.name}, disabled"

    mode = resolve_mode(monitor)
    if monitor.position is None:
        raise NoPosition(monitor.name)

    parts = [
        monitor.name,
        f"{mode.width}x{mode.height}@{_fmt_number(mode.refresh)}",
        f"{monitor.position.x}x{monitor.position.y}",
        _fmt_number(monitor.effective_scale),
        f"transform,{monitor.effective_transform.value}",
    ]
    return "monitor = " + ", ".join(parts)


def generate_config(monitors: list[Monitor]) -> str:
    """Full monitors.conf content, in list order."""
    return "".join(export_line(m) + "\n" for m in monitors)


def save_hyprland_config(path: str | Path, monitors: list[Monitor]) -> Path:
    """Rewrite the config at *path* (``~`` expanded). Returns the written path.

    The content is rendered first so a monitor that cannot be exported
    leaves the existing file untouched.
    """
    content = generate_config(monitors)
    target = expand_path(path)
    write_text(target, content)
    log.info("Wrote %d monitor line(s) to %s", len(monitors), target)
    return target
