from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal, TypeAlias

from scylla_cloud.api.types import (
    CloudProviderResponse,
    ClusterRequestResponse,
    ClusterResponse,
    DatacenterResponse,
    InstanceResponse,
    NodeResponse,
    RegionResponse,
    ScyllaVersionRef,
)

RequestStatus: TypeAlias = Literal["QUEUED", "IN_PROGRESS", "COMPLETED"] | str

PENDING_STATUSES = frozenset({"QUEUED", "IN_PROGRESS"})
COMPLETED_STATUS = "COMPLETED"
CREATE_CLUSTER = "CREATE_CLUSTER"


@dataclass(frozen=True, slots=True)
class ClusterRequest:
    """Remote asynchronous job. Observed only, never mutated locally."""

    id: int
    cluster_id: int
    request_type: str
    status: RequestStatus
    user_friendly_error: str = ""

    @property
    def is_pending(self) -> bool:
        return self.status.upper() in PENDING_STATUSES

    @property
    def is_completed(self) -> bool:
        return self.status.upper() == COMPLETED_STATUS

    @classmethod
    def from_response(cls, data: ClusterRequestResponse) -> ClusterRequest:
        return cls(
            id=data["id"],
            cluster_id=data.get("clusterId", 0),
            request_type=data.get("requestType", ""),
            status=data["status"],
            user_friendly_error=data.get("userFriendlyError") or "",
        )


@dataclass(frozen=True, slots=True)
class Node:
    id: int
    status: str
    private_ip: str = ""
    public_ip: str = ""

    @classmethod
    def from_response(cls, data: NodeResponse) -> Node:
        return cls(
            id=data["id"],
            status=data["status"],
            private_ip=data.get("privateIp", ""),
            public_ip=data.get("publicIp", ""),
        )


def nodes_by_status(nodes: Iterable[Node], status: str) -> list[Node]:
    return [n for n in nodes if n.status == status]


@dataclass(frozen=True, slots=True)
class Datacenter:
    id: int
    name: str
    cidr_block: str
    instance_id: int
    region_id: int = 0

    @classmethod
    def from_response(cls, data: DatacenterResponse) -> Datacenter:
        return cls(
            id=data["id"],
            name=data["name"],
            cidr_block=data["cidrBlock"],
            instance_id=data["instanceId"],
            region_id=data.get("cloudProviderRegionId", 0),
        )


@dataclass(frozen=True, slots=True)
class Cluster:
    """Snapshot of a remote cluster as returned by the API."""

    id: int
    name: str
    status: str
    region_external_id: str
    user_api_interface: str
    broadcast_type: str
    dns: bool
    scylla_version: str
    datacenter: Datacenter
    datacenters: tuple[Datacenter, ...] = ()
    nodes: tuple[Node, ...] = ()

    @classmethod
    def from_response(cls, data: ClusterResponse) -> Cluster:
        return cls(
            id=data["id"],
            name=data["clusterName"],
            status=data["status"],
            region_external_id=data["region"]["externalId"],
            user_api_interface=data["userApiInterface"],
            broadcast_type=data["broadcastType"],
            dns=data["dns"],
            scylla_version=data["scyllaVersion"]["version"],
            datacenter=Datacenter.from_response(data["datacenter"]),
            datacenters=tuple(Datacenter.from_response(d) for d in data.get("datacenters") or ()),
            nodes=tuple(Node.from_response(n) for n in data.get("nodes") or ()),
        )


# =============================================================================
# Deployment metadata
# =============================================================================


@dataclass(frozen=True, slots=True)
class CloudProvider:
    id: int
    name: str

    @classmethod
    def from_response(cls, data: CloudProviderResponse) -> CloudProvider:
        return cls(id=data["id"], name=data["name"])


@dataclass(frozen=True, slots=True)
class Region:
    id: int
    external_id: str
    cloud_provider_id: int = 0

    @classmethod
    def from_response(cls, data: RegionResponse) -> Region:
        return cls(
            id=data["id"],
            external_id=data["externalId"],
            cloud_provider_id=data.get("cloudProviderId", 0),
        )


@dataclass(frozen=True, slots=True)
class Instance:
    id: int
    external_id: str
    cloud_provider_id: int = 0

    @classmethod
    def from_response(cls, data: InstanceResponse) -> Instance:
        return cls(
            id=data["id"],
            external_id=data["externalId"],
            cloud_provider_id=data.get("cloudProviderId", 0),
        )


@dataclass(frozen=True, slots=True)
class ScyllaVersion:
    id: int
    version: str

    @classmethod
    def from_response(cls, data: ScyllaVersionRef) -> ScyllaVersion:
        return cls(id=data["versionId"], version=data["version"])
