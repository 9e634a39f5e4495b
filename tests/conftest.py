from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from scylla_cloud.api.model import (
    CloudProvider,
    Cluster,
    ClusterRequest,
    Datacenter,
    Instance,
    Node,
    Region,
    ScyllaVersion,
)
from scylla_cloud.api.types import ClusterCreateParams
from scylla_cloud.catalog import MetadataCatalog
from scylla_cloud.schema import CLUSTER_SCHEMA, MemoryResourceData

CLUSTER_ID = 42
REQUEST_ID = 500


@pytest.fixture
def catalog() -> MetadataCatalog:
    return MetadataCatalog.build(
        provider=CloudProvider(id=1, name="AWS"),
        regions=[
            Region(id=1, external_id="us-east-1", cloud_provider_id=1),
            Region(id=2, external_id="eu-west-1", cloud_provider_id=1),
        ],
        instances=[
            Instance(id=10, external_id="i3.xlarge", cloud_provider_id=1),
            Instance(id=11, external_id="i3.2xlarge", cloud_provider_id=1),
        ],
        versions=[
            ScyllaVersion(id=100, version="5.1.0"),
            ScyllaVersion(id=101, version="5.2.0"),
        ],
        default_version_id=101,
    )


def _datacenter(**overrides: Any) -> Datacenter:
    base: dict[str, Any] = {
        "id": 7,
        "name": "AWS_US_EAST_1",
        "cidr_block": "172.31.0.0/16",
        "instance_id": 10,
        "region_id": 1,
    }
    return Datacenter(**{**base, **overrides})


def _cluster(**overrides: Any) -> Cluster:
    dc = overrides.pop("datacenter", None) or _datacenter()
    base: dict[str, Any] = {
        "id": CLUSTER_ID,
        "name": "analytics",
        "status": "ACTIVE",
        "region_external_id": "us-east-1",
        "user_api_interface": "CQL",
        "broadcast_type": "PRIVATE",
        "dns": True,
        "scylla_version": "5.2.0",
        "datacenter": dc,
        "datacenters": (dc,),
        "nodes": tuple(Node(id=i, status="ACTIVE") for i in range(3)),
    }
    return Cluster(**{**base, **overrides})


@pytest.fixture
def make_cluster() -> Callable[..., Cluster]:
    return _cluster


@pytest.fixture
def make_datacenter() -> Callable[..., Datacenter]:
    return _datacenter


@dataclass
class FakeClusterAPI:
    """Scripted stand-in for ScyllaCloudClient that records every call."""

    statuses: list[str] = field(default_factory=lambda: ["COMPLETED"])
    cluster: Cluster = field(default_factory=_cluster)
    create_requests: list[ClusterRequest] = field(
        default_factory=lambda: [
            ClusterRequest(REQUEST_ID, CLUSTER_ID, "CREATE_CLUSTER", "COMPLETED"),
        ]
    )
    delete_result: ClusterRequest = field(
        default_factory=lambda: ClusterRequest(501, CLUSTER_ID, "DELETE_CLUSTER", "QUEUED"),
    )
    errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.errors:
            raise self.errors[method]

    def called(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def create_cluster(self, params: ClusterCreateParams) -> ClusterRequest:
        self._record("create_cluster", params)
        return ClusterRequest(REQUEST_ID, CLUSTER_ID, "CREATE_CLUSTER", "QUEUED")

    async def get_cluster(self, cluster_id: int) -> Cluster:
        self._record("get_cluster", cluster_id)
        return self.cluster

    async def get_cluster_request(self, request_id: int) -> ClusterRequest:
        self._record("get_cluster_request", request_id)
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return ClusterRequest(request_id, CLUSTER_ID, "CREATE_CLUSTER", status, "")

    async def list_cluster_requests(
        self, cluster_id: int, request_type: str | None = None,
    ) -> list[ClusterRequest]:
        self._record("list_cluster_requests", cluster_id, request_type)
        return list(self.create_requests)

    async def delete_cluster(self, cluster_id: int, name: str) -> ClusterRequest:
        self._record("delete_cluster", cluster_id, name)
        return self.delete_result


@pytest.fixture
def api() -> FakeClusterAPI:
    return FakeClusterAPI()


@pytest.fixture
def declared() -> MemoryResourceData:
    return MemoryResourceData(
        CLUSTER_SCHEMA,
        {
            "name": "analytics",
            "region": "us-east-1",
            "node_count": 3,
            "node_type": "i3.xlarge",
        },
    )
