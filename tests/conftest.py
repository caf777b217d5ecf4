from __future__ import annotations

import pytest

_CONFIG_VARS = (
    "DNSSEC_EXPORT_FILE",
    "INWX_API_PASS",
    "INWX_API_SECRET",
    "INWX_API_USER",
    "INWX_DEBUG",
    "INWX_SYSTEM",
    "ISPCONFIG_REMOTE_PASS",
    "ISPCONFIG_REMOTE_URI",
    "ISPCONFIG_REMOTE_USER",
    "ISPCONFIG_VERIFY_TLS",
    "VERBOSITY",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
