"""Graph scan response models.

These mirror the payload returned by the scan service. The service adds fields
over time, so unlike the cache models they ignore unknown keys.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ImpactPathNode(BaseModel):
    """One step of an impact path."""

    component_id: str = Field(default="", description="Component at this step")
    full_path: str = Field(default="", description="Location of the component")

    model_config = {"extra": "ignore"}


class ComponentImpact(BaseModel):
    """How a finding affects one component."""

    fixed_versions: list[str] = Field(default_factory=list)
    impact_paths: list[list[ImpactPathNode]] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @property
    def location(self) -> str:
        """Full path of the first element of the first impact path."""
        if not self.impact_paths or not self.impact_paths[0]:
            return ""
        return self.impact_paths[0][0].full_path


class Cve(BaseModel):
    """A CVE reference attached to a finding."""

    cve: Optional[str] = Field(default=None, description="CVE identifier")
    cvss_v2_score: Optional[str] = None
    cvss_v3_score: Optional[str] = None

    model_config = {"extra": "ignore"}


class Vulnerability(BaseModel):
    """A finding returned by a scan without policy context."""

    issue_id: Optional[str] = None
    summary: Optional[str] = None
    severity: Optional[str] = None
    components: Optional[dict[str, Optional[ComponentImpact]]] = Field(
        default=None,
        description="Affected components keyed by scheme-prefixed identifier",
    )
    cves: list[Cve] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @property
    def first_cve(self) -> Optional[str]:
        """First CVE identifier of the finding, if any."""
        for cve in self.cves:
            if cve.cve:
                return cve.cve
        return None


class Violation(Vulnerability):
    """A finding matched against the watches of a policy context."""

    type: Optional[str] = Field(default=None, description="security or license")
    watch_name: Optional[str] = None


class LicenseFinding(BaseModel):
    """A license reported for a set of components."""

    key: Optional[str] = Field(default=None, alias="license_key")
    name: Optional[str] = Field(default=None, alias="license_name")
    components: Optional[dict[str, Optional[ComponentImpact]]] = None

    model_config = {"extra": "ignore", "populate_by_name": True}


class GraphResponse(BaseModel):
    """Result of a graph scan.

    With a policy context the service fills `violations` and `licenses`,
    otherwise `vulnerabilities` and `licenses`. Every collection may be absent.
    """

    scan_id: Optional[str] = None
    package_type: Optional[str] = Field(
        default=None, description="Package type of the scanned graph"
    )
    component_id: Optional[str] = None
    vulnerabilities: Optional[list[Optional[Vulnerability]]] = None
    violations: Optional[list[Optional[Violation]]] = None
    licenses: Optional[list[Optional[LicenseFinding]]] = None

    model_config = {"extra": "ignore"}
