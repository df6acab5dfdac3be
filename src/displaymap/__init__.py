"""Arrange monitors on a map and write them out as Hyprland config."""

__version__ = "0.1.0"
