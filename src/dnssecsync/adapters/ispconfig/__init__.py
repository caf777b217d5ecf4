"""Public interface for the ISPConfig control-plane adapter."""

from __future__ import annotations

from .client import IspConfigControlPlane
from .schema import RemoteResponse, ZonePayload

__all__ = [
    "IspConfigControlPlane",
    "RemoteResponse",
    "ZonePayload",
]
