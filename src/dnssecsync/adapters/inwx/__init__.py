"""Public interface for the INWX registrar adapter."""

from __future__ import annotations

from .client import InwxRegistrar, totp
from .schema import KeyPayload, ListKeysResponse, RpcResponse
from .translator import KeyPayloadInput, parse_remote_key

__all__ = [
    "InwxRegistrar",
    "KeyPayload",
    "KeyPayloadInput",
    "ListKeysResponse",
    "RpcResponse",
    "parse_remote_key",
    "totp",
]
