"""Scan tree reduction and scan orchestration."""

from scan_cache.scan.cancellation import CancellationToken, never_canceled
from scan_cache.scan.orchestrator import (
    ScanOrchestrator,
    ScanOutcome,
    ScanStatus,
    is_supported_service_version,
)
from scan_cache.scan.progress import (
    NullProgressIndicator,
    ProgressIndicator,
    RichProgressIndicator,
)
from scan_cache.scan.tree_builder import ScanTreeBuilder

__all__ = [
    "CancellationToken",
    "NullProgressIndicator",
    "ProgressIndicator",
    "RichProgressIndicator",
    "ScanOrchestrator",
    "ScanOutcome",
    "ScanStatus",
    "ScanTreeBuilder",
    "is_supported_service_version",
    "never_canceled",
]
