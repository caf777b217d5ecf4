"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http import HttpClientConfig
from .inwx import INWX_ENDPOINTS, InwxConfig, InwxSystem, get_inwx_config
from .ispconfig import IspConfigConfig, get_ispconfig_config
from .logging import configure_logging, get_log_level, level_for_verbosity
from .storage import DEFAULT_EXPORT_FILENAME, StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_EXPORT_FILENAME",
    "INWX_ENDPOINTS",
    "ConfigurationError",
    "HttpClientConfig",
    "InwxConfig",
    "InwxSystem",
    "IspConfigConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_inwx_config",
    "get_ispconfig_config",
    "get_log_level",
    "get_storage_config",
    "level_for_verbosity",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
