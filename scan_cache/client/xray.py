"""HTTP client for the JFrog Xray graph scan API."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError

from scan_cache.client.base import ScanServiceClient
from scan_cache.constants import DEFAULT_MAX_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL
from scan_cache.exceptions import NetworkError
from scan_cache.models.config import ScannerConfig
from scan_cache.models.dependency import DependencyTreeNode
from scan_cache.models.graph import GraphResponse

log = structlog.get_logger("scan_cache.client")

VERSION_ENDPOINT = "/api/v1/system/version"
GRAPH_SCAN_ENDPOINT = "/api/v1/scan/graph"

REQUEST_TIMEOUT = httpx.Timeout(30.0)


class XrayClient(ScanServiceClient):
    """Client of the Xray graph scan REST API.

    A graph scan is asynchronous on the server: the graph is posted, then the
    results are polled until the service stops answering 202 (in progress).
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        access_token: Optional[str] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._poll_interval = poll_interval
        self._max_poll_attempts = max_poll_attempts
        self._sleep = sleep
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=url.rstrip("/"),
            auth=_build_auth(username, password, access_token),
            timeout=REQUEST_TIMEOUT,
        )

    @classmethod
    def from_config(cls, config: ScannerConfig) -> XrayClient:
        """Create a client from the server section of a configuration.

        Raises:
            NetworkError: If the configuration has no server section.
        """
        if config.server is None:
            raise NetworkError("No scan service configured: missing 'server' section")
        server = config.server
        return cls(
            url=server.url,
            username=server.username,
            password=server.password,
            access_token=server.access_token,
            poll_interval=config.poll_interval,
            max_poll_attempts=config.max_poll_attempts,
        )

    def __enter__(self) -> XrayClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def version(self) -> str:
        data = self._request("GET", VERSION_ENDPOINT)
        version = data.get("xray_version") if isinstance(data, dict) else None
        if not version:
            raise NetworkError("Scan service did not report its version")
        return str(version)

    def graph_scan(
        self,
        tree: DependencyTreeNode,
        check_canceled: Callable[[], None],
        project: Optional[str] = None,
    ) -> GraphResponse:
        params = {"project": project} if project else None
        body = {
            "component_id": tree.component_id or tree.identifier,
            "nodes": [
                {"component_id": node.component_id or node.identifier}
                for node in tree.children
            ],
        }
        created = self._request("POST", GRAPH_SCAN_ENDPOINT, json=body, params=params)
        scan_id = created.get("scan_id") if isinstance(created, dict) else None
        if not scan_id:
            raise NetworkError("Scan service did not return a scan id")
        log.debug(
            "client.graph_scan_created", scan_id=scan_id, nodes=len(tree.children)
        )

        result_params = {"include_licenses": "true"}
        if not project:
            result_params["include_vulnerabilities"] = "true"
        return self._wait_for_results(scan_id, result_params, check_canceled)

    def _wait_for_results(
        self,
        scan_id: str,
        params: dict[str, str],
        check_canceled: Callable[[], None],
    ) -> GraphResponse:
        url = f"{GRAPH_SCAN_ENDPOINT}/{scan_id}"
        for _ in range(self._max_poll_attempts):
            check_canceled()
            response = self._send("GET", url, params=params)
            if response.status_code != 202:
                try:
                    return GraphResponse.model_validate(response.json())
                except (ValueError, ValidationError) as e:
                    raise NetworkError(f"Invalid graph scan response: {e}") from e
            self._sleep(self._poll_interval)
        raise NetworkError(
            f"Graph scan {scan_id} did not complete after "
            f"{self._max_poll_attempts} attempts"
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = self._send(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError(f"Invalid response from {url}: {e}") from e

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise NetworkError(
                    f"Scan service rejected the credentials (HTTP {status})"
                ) from e
            raise NetworkError(f"Request to {url} failed with HTTP {status}") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Failed to reach scan service: {e}") from e
        return response


def _build_auth(
    username: Optional[str], password: Optional[str], access_token: Optional[str]
) -> Optional[httpx.Auth]:
    if access_token:
        return _BearerAuth(access_token)
    if username:
        return httpx.BasicAuth(username, password or "")
    return None


class _BearerAuth(httpx.Auth):
    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Any:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request
