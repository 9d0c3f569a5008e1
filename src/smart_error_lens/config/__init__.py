"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    CONFIG_KEY_ALIASES,
    FileLoggingConfig,
    LensSettings,
    LoggingConfig,
    ProviderConfig,
    ProviderName,
    ServerConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "LensSettings",
    # Sections
    "ProviderConfig",
    "ServerConfig",
    "LoggingConfig",
    "FileLoggingConfig",
    # Helpers
    "CONFIG_KEY_ALIASES",
    "ProviderName",
]
