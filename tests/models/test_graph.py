"""Tests for graph scan response models."""
from scan_cache.models.graph import (
    ComponentImpact,
    GraphResponse,
    LicenseFinding,
    Violation,
    Vulnerability,
)

RESPONSE = {
    "scan_id": "3d0a1f2e",
    "package_type": "npm",
    "component_id": "project",
    "vulnerabilities": [
        {
            "issue_id": "XRAY-1001",
            "summary": "Prototype pollution",
            "severity": "Critical",
            "components": {
                "npm://left-pad:1.3.0": {
                    "fixed_versions": ["[1.3.1]"],
                    "impact_paths": [
                        [
                            {"component_id": "npm://project", "full_path": "project"},
                            {"component_id": "npm://left-pad:1.3.0"},
                        ]
                    ],
                }
            },
            "cves": [{"cve": "CVE-2020-0001", "cvss_v3_score": "9.8"}],
            "references": ["https://example.com"],
        }
    ],
    "licenses": [
        {
            "license_key": "MIT",
            "license_name": "MIT License",
            "components": {"npm://left-pad:1.3.0": {"impact_paths": []}},
        }
    ],
}


class TestGraphResponse:
    """Tests for GraphResponse model."""

    def test_parses_service_payload(self) -> None:
        """Test parsing a complete payload, ignoring unknown keys."""
        response = GraphResponse.model_validate(RESPONSE)

        assert response.package_type == "npm"
        assert response.violations is None
        assert response.vulnerabilities is not None
        vulnerability = response.vulnerabilities[0]
        assert vulnerability is not None
        assert vulnerability.severity == "Critical"
        assert vulnerability.components is not None
        impact = vulnerability.components["npm://left-pad:1.3.0"]
        assert impact is not None
        assert impact.fixed_versions == ["[1.3.1]"]

    def test_license_aliases(self) -> None:
        """Test that license_key/license_name map to key/name."""
        response = GraphResponse.model_validate(RESPONSE)

        assert response.licenses is not None
        license_finding = response.licenses[0]
        assert license_finding is not None
        assert license_finding.key == "MIT"
        assert license_finding.name == "MIT License"

    def test_empty_payload(self) -> None:
        """Test that every collection is optional."""
        response = GraphResponse.model_validate({})

        assert response.vulnerabilities is None
        assert response.violations is None
        assert response.licenses is None
        assert response.package_type is None

    def test_null_entries_allowed(self) -> None:
        """Test that null findings and null component impacts are accepted."""
        response = GraphResponse.model_validate(
            {
                "violations": [None, {"summary": "x", "components": None}],
                "licenses": [{"license_key": "MIT", "components": {"npm://a:1": None}}],
            }
        )

        assert response.violations is not None
        assert response.violations[0] is None
        assert isinstance(response.violations[1], Violation)


class TestComponentImpact:
    """Tests for ComponentImpact model."""

    def test_location_is_first_full_path(self) -> None:
        """Test that the location is the first element of the first path."""
        impact = ComponentImpact.model_validate(
            {
                "impact_paths": [
                    [{"full_path": "first"}, {"full_path": "second"}],
                    [{"full_path": "other"}],
                ]
            }
        )
        assert impact.location == "first"

    def test_location_empty_without_paths(self) -> None:
        """Test that missing impact paths give an empty location."""
        assert ComponentImpact().location == ""
        assert ComponentImpact.model_validate({"impact_paths": [[]]}).location == ""


class TestFirstCve:
    """Tests for Vulnerability.first_cve."""

    def test_first_cve_kept(self) -> None:
        """Test that only the first CVE identifier is returned."""
        vulnerability = Vulnerability.model_validate(
            {"cves": [{"cve": "CVE-2021-1"}, {"cve": "CVE-2021-2"}]}
        )
        assert vulnerability.first_cve == "CVE-2021-1"

    def test_skips_entries_without_id(self) -> None:
        """Test that CVE entries with only scores are skipped."""
        vulnerability = Vulnerability.model_validate(
            {"cves": [{"cvss_v2_score": "5.0"}, {"cve": ""}, {"cve": "CVE-2021-3"}]}
        )
        assert vulnerability.first_cve == "CVE-2021-3"

    def test_none_without_cves(self) -> None:
        """Test that findings without CVEs have no first CVE."""
        assert Vulnerability().first_cve is None

    def test_populate_license_by_name(self) -> None:
        """Test that license findings can also be built by field name."""
        finding = LicenseFinding(key="MIT", name="MIT License")
        assert finding.key == "MIT"
