"""Scan service clients."""

from scan_cache.client.base import ScanServiceClient
from scan_cache.client.xray import XrayClient

__all__ = [
    "ScanServiceClient",
    "XrayClient",
]
