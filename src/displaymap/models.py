"""Data models: Monitor, Resolution, Position, MonitorState, MonitorCanvas."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# wlr-randr / Wayland protocol names, indexed by Hyprland transform number
_WLR_TRANSFORMS = (
    "normal", "90", "180", "270",
    "flipped", "flipped-90", "flipped-180", "flipped-270",
)


# ── Errors ───────────────────────────────────────────────────────────────

class LayoutError(Exception):
    """Base class for errors raised by the layout engine."""


class NoResolvableMode(LayoutError):
    """The monitor has neither a current nor a preferred mode."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: no current or preferred mode")
        self.name = name


class NoPosition(LayoutError):
    """The monitor has no position in the layout."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: no position")
        self.name = name


class IndexOutOfRange(LayoutError, IndexError):
    """A mode or scale option index past the end of its list."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"index {index} out of range ({length} available)")
        self.index = index
        self.length = length


class InvalidScale(LayoutError, ValueError):
    """Scale factors must be strictly positive."""

    def __init__(self, value: float) -> None:
        super().__init__(f"invalid scale {value!r}: must be > 0")
        self.value = value


# ── Enums ────────────────────────────────────────────────────────────────

class Transform(Enum):
    NORMAL = 0
    ROTATE_90 = 1
    ROTATE_180 = 2
    ROTATE_270 = 3
    FLIPPED = 4
    FLIPPED_90 = 5
    FLIPPED_180 = 6
    FLIPPED_270 = 7

    @property
    def label(self) -> str:
        labels = {
            0: "Normal",
            1: "90°",
            2: "180°",
            3: "270°",
            4: "Flipped",
            5: "Flipped 90°",
            6: "Flipped 180°",
            7: "Flipped 270°",
        }
        return labels[self.value]

    @property
    def degrees(self) -> int:
        """Rotation angle, ignoring the flip."""
        return (self.value % 4) * 90

    @property
    def is_rotated(self) -> bool:
        """True if width/height are swapped (90° or 270° variants)."""
        return self.value in (1, 3, 5, 7)

    @classmethod
    def from_wlr(cls, raw: str | None) -> Transform:
        """Parse a wlr-randr transform string; unknown or missing is normal."""
        if not raw:
            return cls.NORMAL
        try:
            return cls(_WLR_TRANSFORMS.index(raw.strip().lower()))
        except ValueError:
            return cls.NORMAL


class Axis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


# ── Geometry primitives ──────────────────────────────────────────────────

@dataclass
class Position:
    x: int = 0
    y: int = 0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: dict | None) -> Position | None:
        if not isinstance(d, dict):
            return None
        return cls(x=int(d.get("x", 0)), y=int(d.get("y", 0)))


@dataclass
class Resolution:
    width: int = 1920
    height: int = 1080
    refresh: float = 60.0
    preferred: bool = False

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}@{self.refresh:.2f}Hz"

    @classmethod
    def from_dict(cls, d: dict) -> Resolution:
        return cls(
            width=int(d.get("width", 0)),
            height=int(d.get("height", 0)),
            refresh=float(d.get("refresh", 0.0)),
            preferred=bool(d.get("preferred", False)),
        )


# ── Monitor ──────────────────────────────────────────────────────────────

@dataclass
class Monitor:
    # Identity (from wlr-randr --json)
    name: str = ""                      # e.g. "DP-1", "HDMI-A-1"
    description: str | None = None      # e.g. "LG Electronics LG ULTRAWIDE 0x00038C43"
    enabled: bool = True

    # Available modes; ``current`` indexes the active one
    modes: list[Resolution] = field(default_factory=list)
    current: int | None = None

    # Layout (None means not reported yet)
    position: Position | None = None
    scale: float | None = None
    transform: Transform | None = None

    @property
    def current_mode(self) -> Resolution | None:
        if self.current is None or not 0 <= self.current < len(self.modes):
            return None
        return self.modes[self.current]

    @property
    def preferred_mode(self) -> Resolution | None:
        for mode in self.modes:
            if mode.preferred:
                return mode
        return None

    @property
    def effective_scale(self) -> float:
        return 1.0 if self.scale is None else self.scale

    @property
    def effective_transform(self) -> Transform:
        return Transform.NORMAL if self.transform is None else self.transform

    @property
    def display_name(self) -> str:
        if self.description:
            return f"{self.name} ({self.description})"
        return self.name

    @classmethod
    def from_wlr_randr(cls, data: dict) -> Monitor:
        """Create from one entry of ``wlr-randr --json`` output."""
        raw_modes = data.get("modes") or []
        modes = [Resolution.from_dict(m) for m in raw_modes]

        # First mode flagged current wins; wlr-randr reports at most one
        current = None
        for i, m in enumerate(raw_modes):
            if m.get("current"):
                current = i
                break

        scale = data.get("scale")
        return cls(
            name=data.get("name", ""),
            description=data.get("description") or None,
            enabled=bool(data.get("enabled", False)),
            modes=modes,
            current=current,
            position=Position.from_dict(data.get("position")),
            scale=float(scale) if scale is not None else None,
            transform=Transform.from_wlr(data.get("transform")) if data.get("transform") else None,
        )


# ── Persisted / derived records ──────────────────────────────────────────

@dataclass
class MonitorState:
    """The user-adjustable subset of a monitor that survives restarts."""

    name: str = ""
    position: Position | None = None
    scale: float | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "position": self.position.to_dict() if self.position else None,
            "scale": self.scale,
        }

    @classmethod
    def from_dict(cls, d: dict) -> MonitorState:
        scale = d.get("scale")
        return cls(
            name=d.get("name", ""),
            position=Position.from_dict(d.get("position")),
            scale=float(scale) if scale is not None else None,
        )

    @classmethod
    def from_monitor(cls, monitor: Monitor) -> MonitorState:
        position = None
        if monitor.position is not None:
            position = Position(monitor.position.x, monitor.position.y)
        return cls(name=monitor.name, position=position, scale=monitor.scale)


@dataclass
class MonitorCanvas:
    """Viewport enclosing all enabled monitors, in logical coordinates."""

    top: int = 0
    offset_y: int = 0
    x_bounds: tuple[float, float] = (0.0, 0.0)
    y_bounds: tuple[float, float] = (0.0, 0.0)

    @property
    def width(self) -> float:
        return self.x_bounds[1] - self.x_bounds[0]

    @property
    def height(self) -> float:
        return self.y_bounds[1] - self.y_bounds[0]
