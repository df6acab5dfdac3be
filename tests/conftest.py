"""Shared fixtures: small monitor layouts and isolated state/config paths."""

from __future__ import annotations

import pytest

from displaymap.models import Monitor, Position, Resolution, Transform
from displaymap.session import Session
from displaymap.state_manager import StateManager
from displaymap.utils import Configuration


def make_monitor(
    name: str,
    x: int | None = 0,
    y: int | None = 0,
    width: int = 100,
    height: int = 100,
    *,
    scale: float | None = 1.0,
    enabled: bool = True,
    transform: Transform | None = None,
) -> Monitor:
    """A monitor with a single current mode of *width* x *height*."""
    return Monitor(
        name=name,
        enabled=enabled,
        modes=[Resolution(width=width, height=height, refresh=60.0, preferred=True)],
        current=0,
        position=Position(x, y) if x is not None and y is not None else None,
        scale=scale,
        transform=transform,
    )


@pytest.fixture
def test_monitors() -> list[Monitor]:
    return [
        Monitor(
            name="Monitor 1",
            description="Laptop panel",
            enabled=True,
            modes=[
                Resolution(1920, 1080, 60.0, preferred=True),
                Resolution(1280, 720, 60.0),
            ],
            current=0,
            position=Position(0, 0),
            scale=1.0,
            transform=Transform.NORMAL,
        ),
        Monitor(
            name="Monitor 2",
            enabled=True,
            modes=[
                Resolution(2560, 1440, 143.998, preferred=True),
                Resolution(1920, 1080, 60.0),
            ],
            current=0,
            position=Position(1920, 0),
            scale=1.0,
        ),
    ]


@pytest.fixture
def state_manager(tmp_path) -> StateManager:
    return StateManager(tmp_path / "monitor_state.json")


@pytest.fixture
def config(tmp_path) -> Configuration:
    return Configuration(monitors_config_path=str(tmp_path / "hypr" / "monitors.conf"))


@pytest.fixture
def session(test_monitors, config, state_manager) -> Session:
    return Session(test_monitors, config, state_manager)
