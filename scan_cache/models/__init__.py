"""Pydantic data models for scan-cache."""

from scan_cache.models.artifact import Artifact, GeneralInfo, Issue, License, Severity
from scan_cache.models.config import ScannerConfig, ServerConfig
from scan_cache.models.dependency import (
    ComponentPrefix,
    DependencyTreeNode,
    strip_component_prefix,
)
from scan_cache.models.graph import (
    ComponentImpact,
    Cve,
    GraphResponse,
    ImpactPathNode,
    LicenseFinding,
    Violation,
    Vulnerability,
)

__all__ = [
    "Artifact",
    "ComponentImpact",
    "ComponentPrefix",
    "Cve",
    "DependencyTreeNode",
    "GeneralInfo",
    "GraphResponse",
    "ImpactPathNode",
    "Issue",
    "License",
    "LicenseFinding",
    "ScannerConfig",
    "ServerConfig",
    "Severity",
    "Violation",
    "Vulnerability",
    "strip_component_prefix",
]
