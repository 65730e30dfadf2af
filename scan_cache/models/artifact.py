"""Cached scan result models for scan-cache.

An Artifact is the unit of cache storage: one per normalized component
identifier, holding the issues and licenses the scan service reported for it.
"""

from __future__ import annotations

from enum import Enum
from functools import total_ordering
from typing import Any, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from scan_cache.constants import DEFAULT_SUMMARY, UNKNOWN_LICENSE_NAME


@total_ordering
class Severity(Enum):
    """Issue severity, ordered from least to most severe.

    The scan service has used both the Minor/Major/Critical and the
    Low/Medium/High/Critical vocabularies, so both are ranked here.
    """

    NORMAL = "Normal"
    PENDING = "Pending"
    UNKNOWN = "Unknown"
    INFORMATION = "Information"
    LOW = "Low"
    MINOR = "Minor"
    MEDIUM = "Medium"
    MAJOR = "Major"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def _missing_(cls, value: object) -> Severity:
        # Case-insensitive lookup; anything unrecognized is Unknown
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return cls.UNKNOWN

    @property
    def rank(self) -> int:
        """Position of this severity in the ordering (0 = least severe)."""
        return list(Severity).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


class Issue(BaseModel):
    """A vulnerability or security violation affecting a component.

    Two issues are the same finding when summary, fixed versions and CVE match.
    Severity is not part of the identity, so a re-reported finding with a new
    severity replaces the previous record instead of sitting next to it.
    """

    severity: Severity = Field(default=Severity.NORMAL, description="Issue severity")
    summary: str = Field(default=DEFAULT_SUMMARY, description="Human readable summary")
    fixed_versions: frozenset[str] = Field(
        default_factory=frozenset,
        description="Versions of the component in which the issue is fixed",
    )
    cve: Optional[str] = Field(
        default=None,
        description="First CVE identifier reported for the finding",
    )
    issue_id: Optional[str] = Field(
        default=None,
        description="Service-side issue identifier (informational)",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("summary", mode="before")
    @classmethod
    def _default_blank_summary(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_SUMMARY
        return value

    @field_serializer("fixed_versions")
    def _serialize_fixed_versions(self, value: frozenset[str]) -> list[str]:
        return sorted(value)

    def _identity(self) -> tuple[Any, ...]:
        return (self.summary, self.fixed_versions, self.cve)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class License(BaseModel):
    """A license detected for a component.

    `violating` distinguishes a license flagged by an active watch or policy
    from a plain discovery.
    """

    name: str = Field(default=UNKNOWN_LICENSE_NAME, description="License name")
    key: str = Field(default=UNKNOWN_LICENSE_NAME, description="License key")
    fixed_versions: frozenset[str] = Field(
        default_factory=frozenset,
        description="Versions of the component not affected by the violation",
    )
    violating: bool = Field(
        default=False,
        description="True if the license violates a configured policy",
    )

    model_config = {"extra": "forbid", "frozen": True}

    @field_serializer("fixed_versions")
    def _serialize_fixed_versions(self, value: frozenset[str]) -> list[str]:
        return sorted(value)

    @property
    def is_unknown(self) -> bool:
        """True for the placeholder used when no license was detected."""
        return self.key == UNKNOWN_LICENSE_NAME

    def _identity(self) -> tuple[Any, ...]:
        return (self.name, self.key, self.fixed_versions, self.violating)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, License):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


class GeneralInfo(BaseModel):
    """General information about a cached component."""

    component_id: str = Field(description="Normalized component identifier")
    path: str = Field(
        default="",
        description="Location of the component, taken from its first impact path",
    )
    pkg_type: str = Field(default="", description="Package type, e.g. 'npm'")

    model_config = {"extra": "forbid"}


class Artifact(BaseModel):
    """Scan results for a single component."""

    general_info: GeneralInfo = Field(description="Component information")
    issues: set[Issue] = Field(default_factory=set, description="Detected issues")
    licenses: set[License] = Field(default_factory=set, description="Detected licenses")

    model_config = {"extra": "forbid"}

    @classmethod
    def placeholder(cls, component_id: str) -> Artifact:
        """Create an Artifact with no issues and no licenses.

        Args:
            component_id: Normalized component identifier.

        Returns:
            Empty Artifact for the component.
        """
        return cls(general_info=GeneralInfo(component_id=component_id))

    @property
    def component_id(self) -> str:
        """Normalized component identifier of this Artifact."""
        return self.general_info.component_id

    @property
    def top_severity(self) -> Optional[Severity]:
        """Most severe issue severity, or None when there are no issues."""
        if not self.issues:
            return None
        return max(issue.severity for issue in self.issues)

    @field_serializer("issues")
    def _serialize_issues(self, value: set[Issue]) -> list[Issue]:
        # Deterministic order for the on-disk cache
        return sorted(
            value,
            key=lambda i: (
                -i.severity.rank,
                i.summary,
                i.cve or "",
                sorted(i.fixed_versions),
            ),
        )

    @field_serializer("licenses")
    def _serialize_licenses(self, value: set[License]) -> list[License]:
        return sorted(
            value,
            key=lambda lic: (
                lic.name,
                lic.key,
                lic.violating,
                sorted(lic.fixed_versions),
            ),
        )
