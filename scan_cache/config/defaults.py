"""Default configuration values for scan-cache."""

from __future__ import annotations

from scan_cache.models.config import ScannerConfig

# Default configuration file names to search for
DEFAULT_CONFIG_NAMES = [".scan-cache.yaml", ".scan-cache.yml"]


def get_default_config() -> ScannerConfig:
    """Get the default configuration.

    Returns:
        ScannerConfig with no server and default cache settings.
    """
    return ScannerConfig()
