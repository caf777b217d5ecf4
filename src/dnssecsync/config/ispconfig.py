"""ISPConfig control-plane configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, require_env_vars
from .http import HttpClientConfig

ISPCONFIG_TIMEOUT_SECONDS: Final[float] = 60.0


@dataclass(frozen=True)
class IspConfigConfig:
    """Holds ISPConfig remote API credentials and transport settings.

    ``remote_uri`` points at the JSON remoting endpoint, e.g.
    ``https://panel.example.net:8080/remote/json.php``.
    """

    remote_uri: str
    user: str
    password: str
    http: HttpClientConfig


def get_ispconfig_config(*, http: HttpClientConfig | None = None) -> IspConfigConfig:
    values = require_env_vars(
        ("ISPCONFIG_REMOTE_URI", "ISPCONFIG_REMOTE_USER", "ISPCONFIG_REMOTE_PASS")
    )
    return IspConfigConfig(
        remote_uri=values["ISPCONFIG_REMOTE_URI"].strip(),
        user=values["ISPCONFIG_REMOTE_USER"],
        password=values["ISPCONFIG_REMOTE_PASS"],
        http=http
        or HttpClientConfig(
            name="ispconfig",
            timeout_seconds=ISPCONFIG_TIMEOUT_SECONDS,
            verify_tls=env_flag("ISPCONFIG_VERIFY_TLS", default=True),
        ),
    )
