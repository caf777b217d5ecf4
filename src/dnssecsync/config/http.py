"""Configuration types for collaborator HTTP sessions."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import httpx

ResponseHook = Callable[[httpx.Response], None]
RequestHook = Callable[[httpx.Request], None]


@dataclass(slots=True, frozen=True)
class HttpClientConfig:
    """Transport settings for one collaborator session.

    Sessions are never retried: a transport failure surfaces to the caller as-is.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    verify_tls: bool = True
    request_hooks: tuple[RequestHook, ...] = field(default_factory=tuple)
    response_hooks: tuple[ResponseHook, ...] = field(default_factory=tuple)
    default_headers: Mapping[str, str] | None = None
