"""Constants for scan-cache."""

# Exit codes
EXIT_SUCCESS = 0  # Scan completed or nothing to scan
EXIT_ERROR = 2  # Scan failed or was canceled

# Graph scan is available starting with this service version
MINIMAL_SERVICE_VERSION = "3.29.0"

# Summary used for findings the service sent without one
DEFAULT_SUMMARY = "N/A"

# Name and key of the placeholder license for components with no detected license
UNKNOWN_LICENSE_NAME = "Unknown"

# Separator between the package scheme and the component identifier
COMPONENT_SCHEME_SEPARATOR = "://"

# Result polling defaults for the graph scan endpoint
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_MAX_POLL_ATTEMPTS = 60
