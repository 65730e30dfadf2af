"""Scan orchestration: from a dependency tree to a persisted artifact cache."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Optional

import structlog
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, Field

from scan_cache.cache.artifact_cache import ArtifactCache
from scan_cache.cache.merger import ResultMerger
from scan_cache.client.base import ScanServiceClient
from scan_cache.constants import MINIMAL_SERVICE_VERSION
from scan_cache.exceptions import (
    CacheStoreError,
    NetworkError,
    ScanCacheError,
    ScanCanceledError,
    UnsupportedServiceVersionError,
)
from scan_cache.models.artifact import Artifact
from scan_cache.models.dependency import ComponentPrefix, DependencyTreeNode
from scan_cache.scan.cancellation import never_canceled
from scan_cache.scan.progress import NullProgressIndicator, ProgressIndicator
from scan_cache.scan.tree_builder import ScanTreeBuilder

log = structlog.get_logger("scan_cache.scan")


class ScanStatus(Enum):
    """Terminal state of a scan."""

    SUCCESS = "success"
    NOTHING_TO_SCAN = "nothing_to_scan"
    CANCELED = "canceled"
    FAILED = "failed"


class ScanOutcome(BaseModel):
    """Result of a scan run."""

    model_config = {"extra": "forbid"}

    status: ScanStatus = Field(description="Terminal state of the scan")
    reason: Optional[str] = Field(
        default=None, description="Why the scan failed, for FAILED outcomes"
    )
    scanned_components: int = Field(
        default=0, ge=0, description="Number of components sent to the service"
    )

    @property
    def succeeded(self) -> bool:
        """True only if the scan completed and the cache was persisted."""
        return self.status == ScanStatus.SUCCESS


def is_supported_service_version(version: str) -> bool:
    """Check a service version against the minimal graph scan version.

    Versions are compared semantically ("3.100.0" is newer than "3.29.0").
    Unparseable versions are not supported.

    Args:
        version: Version reported by the service.

    Returns:
        True if the version is MINIMAL_SERVICE_VERSION or newer.
    """
    try:
        return Version(version) >= Version(MINIMAL_SERVICE_VERSION)
    except InvalidVersion:
        return False


class ScanOrchestrator:
    """Scans a project's dependencies and caches the results.

    Failures of the scan service never propagate: every run ends in one of
    the ScanStatus states and the reason is logged.
    """

    def __init__(self, cache: ArtifactCache, client: ScanServiceClient) -> None:
        self._cache = cache
        self._client = client
        self._tree_builder = ScanTreeBuilder(cache)
        self._merger = ResultMerger(cache)

    @property
    def cache(self) -> ArtifactCache:
        """The artifact cache this orchestrator scans into."""
        return self._cache

    def scan_and_cache_artifacts(
        self,
        root: DependencyTreeNode,
        quick_scan: bool,
        project: Optional[str] = None,
        prefix: Optional[ComponentPrefix] = None,
        check_canceled: Optional[Callable[[], None]] = None,
        indicator: Optional[ProgressIndicator] = None,
    ) -> ScanOutcome:
        """Scan the components of a dependency tree and cache the results.

        Args:
            root: Root of the project's dependency tree.
            quick_scan: True to skip components already in the cache.
            project: Policy context. A non-empty value scans for violations
                of the project's watches instead of plain vulnerabilities.
            prefix: Package scheme used to derive missing component ids.
            check_canceled: Cancellation check; raises ScanCanceledError.
            indicator: Progress indicator.

        Returns:
            ScanOutcome describing how the scan ended.
        """
        check = check_canceled or never_canceled
        project = (project or "").strip() or None
        progress = indicator or NullProgressIndicator()

        # The graph scan API does not report partial progress
        progress.set_indeterminate(True)
        if prefix is not None:
            root.set_prefix(prefix)

        nodes_to_scan = self._tree_builder.build_scan_tree(root, quick_scan)
        if nodes_to_scan.is_leaf:
            log.debug("scan.nothing_to_scan")
            return ScanOutcome(status=ScanStatus.NOTHING_TO_SCAN)

        components = len(nodes_to_scan.children)
        try:
            self._check_service_version()
            log.debug("scan.started", components=components, project=project)
            check()
            self._scan_components(nodes_to_scan, project, check)

            progress.set_fraction(1.0)
            log.debug("scan.saving_cache")
            self._cache.write()
            log.debug("scan.cache_saved", artifacts=len(self._cache))
        except ScanCanceledError:
            log.info("scan.canceled")
            return ScanOutcome(
                status=ScanStatus.CANCELED, scanned_components=components
            )
        except UnsupportedServiceVersionError as e:
            log.error("scan.unsupported_service_version", reason=str(e))
            return ScanOutcome(status=ScanStatus.FAILED, reason=str(e))
        except NetworkError as e:
            log.error(
                "scan.failed",
                reason=str(e),
                hint="Please check the server URL and your credentials.",
            )
            return ScanOutcome(status=ScanStatus.FAILED, reason=str(e))
        except CacheStoreError as e:
            log.error("scan.cache_write_failed", reason=str(e))
            return ScanOutcome(
                status=ScanStatus.FAILED, reason=str(e), scanned_components=components
            )
        except ScanCacheError as e:
            log.error("scan.failed", reason=str(e))
            return ScanOutcome(status=ScanStatus.FAILED, reason=str(e))

        return ScanOutcome(status=ScanStatus.SUCCESS, scanned_components=components)

    def get_artifact_summary(self, component_id: str) -> Artifact:
        """Get the cached scan summary of a component.

        See ArtifactCache.get_summary.
        """
        return self._cache.get_summary(component_id)

    def _check_service_version(self) -> None:
        version = self._client.version()
        if not is_supported_service_version(version):
            raise UnsupportedServiceVersionError(
                f"Unsupported scan service version {version}: "
                f"version {MINIMAL_SERVICE_VERSION} or above is required"
            )

    def _scan_components(
        self,
        nodes_to_scan: DependencyTreeNode,
        project: Optional[str],
        check_canceled: Callable[[], None],
    ) -> None:
        if project:
            # With a context only the project's watches are applied
            response = self._client.graph_scan(nodes_to_scan, check_canceled, project)
            self._merger.merge(response, violating=True)
        else:
            response = self._client.graph_scan(nodes_to_scan, check_canceled)
            self._merger.merge(response, violating=False)
