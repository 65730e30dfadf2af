"""Configuration handling for scan-cache."""
from __future__ import annotations

from scan_cache.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from scan_cache.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
)
from scan_cache.models.config import ScannerConfig, ServerConfig

__all__ = [
    "DEFAULT_CONFIG_NAMES",
    "ScannerConfig",
    "ServerConfig",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
]
