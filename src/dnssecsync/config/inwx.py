"""INWX registrar configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from .env import env_flag, optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http import HttpClientConfig

INWX_TIMEOUT_SECONDS: Final[float] = 30.0


class InwxSystem(StrEnum):
    LIVE = "Live"
    OTE = "Ote"


INWX_ENDPOINTS: Final[dict[InwxSystem, str]] = {
    InwxSystem.LIVE: "https://api.domrobot.com/jsonrpc/",
    InwxSystem.OTE: "https://api.ote.domrobot.com/jsonrpc/",
}


@dataclass(frozen=True)
class InwxConfig:
    """Holds INWX Domrobot API credentials and transport settings."""

    user: str
    password: str
    http: HttpClientConfig
    shared_secret: str | None = None
    system: InwxSystem = InwxSystem.LIVE
    debug: bool = False


def _parse_system(value: str | None) -> InwxSystem:
    if value is None:
        return InwxSystem.LIVE
    for system in InwxSystem:
        if system.value.lower() == value.lower():
            return system
    allowed = ", ".join(system.value for system in InwxSystem)
    raise ConfigurationError(f"Invalid INWX_SYSTEM {value!r} (expected one of: {allowed})")


def get_inwx_config(*, http: HttpClientConfig | None = None) -> InwxConfig:
    values = require_env_vars(("INWX_API_USER", "INWX_API_PASS"))
    system = _parse_system(optional_env_var("INWX_SYSTEM"))
    return InwxConfig(
        user=values["INWX_API_USER"],
        password=values["INWX_API_PASS"],
        shared_secret=optional_env_var("INWX_API_SECRET"),
        system=system,
        debug=env_flag("INWX_DEBUG"),
        http=http
        or HttpClientConfig(
            name="inwx",
            base_url=INWX_ENDPOINTS[system],
            timeout_seconds=INWX_TIMEOUT_SECONDS,
        ),
    )
