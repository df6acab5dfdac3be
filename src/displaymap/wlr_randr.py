"""Monitor discovery through ``wlr-randr --json``."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Callable

from .models import Monitor

log = logging.getLogger(__name__)

WLR_RANDR_CMD = ["wlr-randr", "--json"]


def parse_monitors(raw: str) -> list[Monitor]:
    """Parse the JSON array printed by ``wlr-randr --json``."""
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("wlr-randr output is not a JSON array")
    return [Monitor.from_wlr_randr(entry) for entry in data if isinstance(entry, dict)]


def get_monitors(runner: Callable[..., subprocess.CompletedProcess] = subprocess.run) -> list[Monitor]:
    """Query all outputs (including disabled ones).

    Failures are logged and produce an empty list so the editor still
    starts.
    """
    try:
        result = runner(WLR_RANDR_CMD, capture_output=True, text=True, check=True)
    except FileNotFoundError:
        log.error("wlr-randr is not installed")
        return []
    except subprocess.CalledProcessError as e:
        log.error("wlr-randr failed (exit %d): %s", e.returncode, (e.stderr or "").strip())
        return []

    try:
        monitors = parse_monitors(result.stdout)
    except (ValueError, TypeError, AttributeError) as e:
        # json.JSONDecodeError is a ValueError
        log.error("Cannot parse wlr-randr output: %s", e)
        return []

    log.info("Discovered %d monitor(s): %s", len(monitors), ", ".join(m.name for m in monitors))
    return monitors
