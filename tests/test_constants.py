"""Tests for constants module."""
from packaging.version import Version

from scan_cache.constants import (
    COMPONENT_SCHEME_SEPARATOR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    MINIMAL_SERVICE_VERSION,
)


class TestExitCodes:
    """Tests for exit code constants."""

    def test_exit_codes_distinct(self) -> None:
        """Test that success and error exit codes differ."""
        assert EXIT_SUCCESS == 0
        assert EXIT_ERROR != EXIT_SUCCESS


class TestMinimalServiceVersion:
    """Tests for MINIMAL_SERVICE_VERSION constant."""

    def test_is_parseable(self) -> None:
        """Test that the minimal version is a valid version string."""
        assert Version(MINIMAL_SERVICE_VERSION) == Version("3.29.0")


def test_scheme_separator() -> None:
    """Test the separator between package scheme and identifier."""
    assert "npm://left-pad:1.3.0".partition(COMPONENT_SCHEME_SEPARATOR)[2] == (
        "left-pad:1.3.0"
    )
