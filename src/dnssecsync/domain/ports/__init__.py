"""Domain port definitions for adapters."""

from __future__ import annotations

from .control_plane import ControlPlane, ZoneSnapshot
from .registrar import KeyRegistrar, PublishRequest

__all__ = [
    "ControlPlane",
    "KeyRegistrar",
    "PublishRequest",
    "ZoneSnapshot",
]
