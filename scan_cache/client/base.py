"""Base scan service client interface."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Optional

from scan_cache.models.dependency import DependencyTreeNode
from scan_cache.models.graph import GraphResponse


class ScanServiceClient(ABC):
    """Abstract base class for clients of the graph scan service.

    Clients own transport concerns: authentication, timeouts, retries and
    waiting for results.
    """

    @abstractmethod
    def version(self) -> str:
        """Get the version reported by the scan service.

        Returns:
            Version string, e.g. "3.29.0".

        Raises:
            NetworkError: If the service cannot be reached or rejects the
                credentials.
        """

    @abstractmethod
    def graph_scan(
        self,
        tree: DependencyTreeNode,
        check_canceled: Callable[[], None],
        project: Optional[str] = None,
    ) -> GraphResponse:
        """Scan a flat graph of components.

        Args:
            tree: Synthetic root whose children are the components to scan.
            check_canceled: Cancellation check, called while waiting for
                results. Raises ScanCanceledError to abort.
            project: Policy context. When set, the response carries
                violations and violating licenses; otherwise vulnerabilities
                and plain licenses.

        Returns:
            The scan results.

        Raises:
            NetworkError: If the scan cannot be completed.
            ScanCanceledError: If check_canceled signals cancellation.
        """
