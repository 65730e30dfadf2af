"""Merging of graph scan results into the artifact cache.

Findings reference the components they affect by scheme-prefixed identifier.
Each finding/component pair is folded into the cached Artifact of that
component independently, so a partially merged response leaves the cache
consistent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional

import structlog

from scan_cache.cache.artifact_cache import ArtifactCache
from scan_cache.models.artifact import Artifact, GeneralInfo, Issue, License, Severity
from scan_cache.models.dependency import strip_component_prefix
from scan_cache.models.graph import (
    ComponentImpact,
    GraphResponse,
    LicenseFinding,
    Violation,
    Vulnerability,
)

log = structlog.get_logger("scan_cache.merge")


class ResultMerger:
    """Folds vulnerabilities, violations and licenses into an ArtifactCache.

    Re-adding a record equal to one already cached replaces it, so forced
    rescans refine earlier data without duplicating it.
    """

    def __init__(self, cache: ArtifactCache) -> None:
        self._cache = cache

    def merge(self, response: GraphResponse, violating: bool) -> None:
        """Fold a complete graph scan response into the cache.

        Args:
            response: Response of the scan service.
            violating: True if the scan ran with a policy context. Selects the
                violations collection and marks licenses as violations;
                otherwise vulnerabilities and plain licenses are merged.
        """
        pkg_type = response.package_type or ""
        if violating:
            for violation in response.violations or []:
                if violation is not None:
                    self.add_violation(violation, pkg_type)
        else:
            for vulnerability in response.vulnerabilities or []:
                if vulnerability is not None:
                    self.add_vulnerability(vulnerability, pkg_type)

        for license_finding in response.licenses or []:
            if license_finding is not None:
                self.add_license(license_finding, pkg_type, violating)

    def add_vulnerability(self, vulnerability: Vulnerability, pkg_type: str) -> None:
        """Add a vulnerability to every component it affects."""
        self._add_issue(vulnerability, pkg_type)

    def add_violation(self, violation: Violation, pkg_type: str) -> None:
        """Add a security or license violation to every component it affects."""
        self._add_issue(violation, pkg_type)

    def add_license(
        self, license_finding: LicenseFinding, pkg_type: str, violating: bool
    ) -> None:
        """Add a license to every component it was detected in.

        Args:
            license_finding: License reported by the service.
            pkg_type: Package type of the scanned graph.
            violating: True if the license violates a configured policy.
        """
        for key, component in self._iter_components(license_finding.components):
            candidate = License(
                name=license_finding.name or "",
                key=license_finding.key or "",
                fixed_versions=frozenset(component.fixed_versions),
                violating=violating,
            )
            artifact = self._cache.get(key)
            if artifact is None:
                self._cache.add(
                    Artifact(
                        general_info=self._general_info(key, component, pkg_type),
                        licenses={candidate},
                    )
                )
                continue
            if not candidate.is_unknown:
                # A detected license supersedes the placeholder shown in summaries
                artifact.licenses.difference_update(
                    [lic for lic in artifact.licenses if lic.is_unknown]
                )
            # Override existing info, in case of a forced scan
            artifact.licenses.discard(candidate)
            artifact.licenses.add(candidate)

    def _add_issue(self, finding: Vulnerability, pkg_type: str) -> None:
        # Only the first CVE is kept per issue
        cve = finding.first_cve
        severity = Severity(finding.severity or Severity.UNKNOWN.value)
        for key, component in self._iter_components(finding.components):
            candidate = Issue(
                severity=severity,
                summary=finding.summary,
                fixed_versions=frozenset(component.fixed_versions),
                cve=cve,
                issue_id=finding.issue_id,
            )
            artifact = self._cache.get(key)
            if artifact is None:
                self._cache.add(
                    Artifact(
                        general_info=self._general_info(key, component, pkg_type),
                        issues={candidate},
                    )
                )
                continue
            artifact.issues.discard(candidate)
            artifact.issues.add(candidate)

    @staticmethod
    def _iter_components(
        components: Optional[Mapping[str, Optional[ComponentImpact]]],
    ) -> list[tuple[str, ComponentImpact]]:
        """Pair each affected component's cache key with its impact.

        Findings without a component mapping, and components without impact
        data, are skipped: the service occasionally sends incomplete findings.
        """
        if components is None:
            log.debug("merge.finding_without_components")
            return []
        pairs: list[tuple[str, ComponentImpact]] = []
        for component_id, component in components.items():
            if component is None:
                log.debug(
                    "merge.component_without_impact", component_id=component_id
                )
                continue
            pairs.append((strip_component_prefix(component_id), component))
        return pairs

    @staticmethod
    def _general_info(
        key: str, component: ComponentImpact, pkg_type: str
    ) -> GeneralInfo:
        return GeneralInfo(
            component_id=key, path=component.location, pkg_type=pkg_type
        )
