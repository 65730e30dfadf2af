"""Configuration Pydantic models for scan-cache."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from scan_cache.constants import DEFAULT_MAX_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL

DEFAULT_CACHE_PATH = ".scan-cache/cache.json"


class ServerConfig(BaseModel):
    """Connection details of the scan service.

    Either an access token or a username/password pair is used for
    authentication. The access token wins when both are set.
    """

    model_config = {"extra": "forbid"}

    url: str = Field(description="Base URL of the scan service")
    username: Optional[str] = Field(default=None, description="Basic auth username")
    password: Optional[str] = Field(default=None, description="Basic auth password")
    access_token: Optional[str] = Field(
        default=None, description="Bearer access token"
    )
    project: Optional[str] = Field(
        default=None,
        description="Project key sent as policy context. "
        "When set, scans report policy violations instead of vulnerabilities.",
    )


class ScannerConfig(BaseModel):
    """Configuration for scan-cache.

    Only the server section is required to run a scan; summaries can be read
    from the cache without it.
    """

    model_config = {"extra": "forbid"}

    server: Optional[ServerConfig] = Field(
        default=None, description="Scan service connection"
    )
    cache_path: str = Field(
        default=DEFAULT_CACHE_PATH,
        description="File the artifact cache is persisted to",
    )
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL,
        gt=0,
        description="Seconds between polls for graph scan results",
    )
    max_poll_attempts: int = Field(
        default=DEFAULT_MAX_POLL_ATTEMPTS,
        ge=1,
        description="Polls before giving up on graph scan results",
    )
