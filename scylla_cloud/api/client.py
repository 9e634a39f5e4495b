"""Async HTTP client for the ScyllaDB Cloud API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from scylla_cloud.api.model import (
    CloudProvider,
    Cluster,
    ClusterRequest,
    Instance,
    Region,
    ScyllaVersion,
)
from scylla_cloud.errors import ScyllaCloudAPIError
from scylla_cloud.infra.http import BearerAuth, HttpClient, HttpError
from scylla_cloud.retry import on_status_code, retry

if TYPE_CHECKING:
    from scylla_cloud.api.types import (
        AccountResponse,
        CloudProviderResponse,
        ClusterCreateParams,
        ClusterDeleteParams,
        ClusterRequestResponse,
        ClusterResponse,
        ProviderRegionsResponse,
        ScyllaVersionsResponse,
    )
    from scylla_cloud.config import ProviderConfig


class ScyllaCloudClient:
    """Async client for the ScyllaDB Cloud REST API.

    Every cluster endpoint is scoped to the caller's account. The account id
    is fetched on first use and cached for the lifetime of the client.

    Example:
        async with ScyllaCloudClient(config) as client:
            cluster = await client.get_cluster(42)
    """

    def __init__(self, config: ProviderConfig, http: HttpClient | None = None) -> None:
        self._config = config
        self._log = logger.bind(component="client")
        self._http = http or HttpClient(
            config.endpoint,
            BearerAuth(config.require_token()),
            timeout=config.request_timeout,
            default_headers={"Content-Type": "application/json"},
        )
        self._account_id: int | None = None

    async def __aenter__(self) -> ScyllaCloudClient:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self._http.close()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            body = await self._http.request(method, path, json=json, params=params)
        except HttpError as e:
            raise ScyllaCloudAPIError(f"API error {e.status}: {e.body}", status=e.status) from e

        if not isinstance(body, dict):
            return body
        if error := body.get("error"):
            raise ScyllaCloudAPIError(f"API error: {error}")
        return body.get("data", body)

    async def _account_path(self, suffix: str) -> str:
        if self._account_id is None:
            self._account_id = await self.get_account_id()
        return f"/account/{self._account_id}{suffix}"

    @retry(on=on_status_code(429, 503), max_attempts=3, base_delay=1.0)
    async def get_account_id(self) -> int:
        result: AccountResponse = await self._request("GET", "/account/default")
        self._log.debug("Using account {account}", account=result["accountId"])
        return result["accountId"]

    # =========================================================================
    # Clusters
    # =========================================================================

    async def create_cluster(self, params: ClusterCreateParams) -> ClusterRequest:
        """Submit a cluster creation request. Not retried."""
        path = await self._account_path("/cluster")
        self._log.debug("Creating cluster {name}", name=params.get("clusterName"))
        result: ClusterRequestResponse = await self._request("POST", path, json=dict(params))
        return ClusterRequest.from_response(result)

    @retry(on=on_status_code(429, 503), max_attempts=3, base_delay=1.0)
    async def get_cluster(self, cluster_id: int) -> Cluster:
        path = await self._account_path(f"/cluster/{cluster_id}")
        result: dict[str, Any] = await self._request("GET", path, params={"enriched": "true"})
        data: ClusterResponse = result.get("cluster", result)  # type: ignore[assignment]
        return Cluster.from_response(data)

    async def get_cluster_request(self, request_id: int) -> ClusterRequest:
        """Fetch a request record. Not retried; a failed poll surfaces to the caller."""
        path = await self._account_path(f"/cluster/request/{request_id}")
        result: ClusterRequestResponse = await self._request("GET", path)
        return ClusterRequest.from_response(result)

    @retry(on=on_status_code(429, 503), max_attempts=3, base_delay=1.0)
    async def list_cluster_requests(
        self, cluster_id: int, request_type: str | None = None,
    ) -> list[ClusterRequest]:
        path = await self._account_path(f"/cluster/{cluster_id}/request")
        params = {"type": request_type} if request_type else None
        result: list[ClusterRequestResponse] | None = await self._request("GET", path, params=params)
        return [ClusterRequest.from_response(r) for r in result or []]

    async def delete_cluster(self, cluster_id: int, name: str) -> ClusterRequest:
        """Submit a cluster deletion request. Not retried."""
        path = await self._account_path(f"/cluster/{cluster_id}/delete")
        self._log.debug("Deleting cluster {cluster_id} ({name})", cluster_id=cluster_id, name=name)
        body: ClusterDeleteParams = {"clusterName": name}
        result: ClusterRequestResponse = await self._request("POST", path, json=dict(body))
        return ClusterRequest.from_response(result)

    # =========================================================================
    # Deployment metadata
    # =========================================================================

    @retry(on=on_status_code(429, 503), max_attempts=3, base_delay=1.0)
    async def list_cloud_providers(self) -> list[CloudProvider]:
        result: list[CloudProviderResponse] | None = await self._request(
            "GET", "/deployment/cloud-providers",
        )
        return [CloudProvider.from_response(p) for p in result or []]

    @retry(on=on_status_code(429, 503), max_attempts=3, base_delay=1.0)
    async def list_regions(self, provider_id: int) -> tuple[list[Region], list[Instance]]:
        """Regions and instance types offered by a cloud provider."""
        result: ProviderRegionsResponse = await self._request(
            "GET", f"/deployment/cloud-provider/{provider_id}/regions",
        )
        return (
            [Region.from_response(r) for r in result.get("regions", [])],
            [Instance.from_response(i) for i in result.get("instances", [])],
        )

    @retry(on=on_status_code(429, 503), max_attempts=3, base_delay=1.0)
    async def list_scylla_versions(self) -> tuple[list[ScyllaVersion], int]:
        """Available versions and the id of the current default."""
        result: ScyllaVersionsResponse = await self._request("GET", "/deployment/scylla-versions")
        return (
            [ScyllaVersion.from_response(v) for v in result.get("scyllaVersions", [])],
            result["defaultScyllaVersionId"],
        )
