"""Custom exceptions for scan-cache."""


class ScanCacheError(Exception):
    """Base exception for all scan-cache errors."""

    pass


class NetworkError(ScanCacheError):
    """Exception raised when a request to the scan service fails."""

    pass


class ConfigurationError(ScanCacheError):
    """Exception raised when configuration is invalid."""

    pass


class ScanError(ScanCacheError):
    """Exception raised when a scan operation fails."""

    pass


class UnsupportedServiceVersionError(ScanError):
    """Exception raised when the scan service is older than the supported minimum."""

    pass


class ScanCanceledError(ScanCacheError):
    """Exception raised when the caller cancels a running scan."""

    pass


class CacheStoreError(ScanCacheError):
    """Exception raised when the cache cannot be read from or written to storage."""

    pass
