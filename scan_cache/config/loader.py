"""Configuration file discovery and loading for scan-cache."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from scan_cache.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from scan_cache.exceptions import ConfigurationError
from scan_cache.models.config import ScannerConfig

# Credentials may be kept out of the config file
ACCESS_TOKEN_ENV = "SCAN_CACHE_ACCESS_TOKEN"
PASSWORD_ENV = "SCAN_CACHE_PASSWORD"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file in the specified directory.

    Searches for `.scan-cache.yaml` first, then `.scan-cache.yml`.

    Args:
        start_dir: Directory to search. Defaults to current working directory.

    Returns:
        Path to the configuration file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        config_path = search_dir / name
        if config_path.exists():
            return config_path
    return None


def load_config_file(path: Path) -> ScannerConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the configuration file.

    Returns:
        Validated ScannerConfig instance, with credentials from the
        environment applied.

    Raises:
        ConfigurationError: If file cannot be read, has invalid YAML,
            or fails Pydantic validation.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e

    try:
        data = yaml.safe_load(content) if content.strip() else None
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    # Empty file or only comments
    if data is None:
        return _apply_env_credentials(get_default_config())

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )

    try:
        config = ScannerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_format_validation_errors(e)}"
        ) from e
    return _apply_env_credentials(config)


def _format_validation_errors(error: ValidationError) -> str:
    """Format Pydantic validation errors into a readable string.

    Args:
        error: The Pydantic ValidationError.

    Returns:
        Formatted error message string, e.g. "server.url: Field required".
    """
    messages: list[str] = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"]) if err["loc"] else "root"
        messages.append(f"{loc}: {err['msg']}")
    return "; ".join(messages)


def _apply_env_credentials(config: ScannerConfig) -> ScannerConfig:
    """Fill credentials missing from the file from environment variables."""
    if config.server is None:
        return config

    updates: dict[str, Any] = {}
    token = os.environ.get(ACCESS_TOKEN_ENV)
    if token and not config.server.access_token:
        updates["access_token"] = token
    password = os.environ.get(PASSWORD_ENV)
    if password and not config.server.password:
        updates["password"] = password

    if not updates:
        return config
    return config.model_copy(
        update={"server": config.server.model_copy(update=updates)}
    )


def load_config(config_path: str | None = None) -> ScannerConfig:
    """Load configuration from file or use defaults.

    If a config_path is provided, loads from that file.
    Otherwise, searches for a configuration file in the current directory.
    If no file is found, returns default configuration.

    Args:
        config_path: Optional path to configuration file.

    Returns:
        ScannerConfig with loaded or default values.

    Raises:
        ConfigurationError: If the selected config file is invalid.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    discovered = find_config_file()
    if discovered is not None:
        return load_config_file(discovered)

    return get_default_config()
