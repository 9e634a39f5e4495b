"""ScyllaDB Cloud API wire types.

TypedDicts for request bodies and response payloads, keyed exactly as the
API sends them. Responses arrive wrapped in ``{"error": ..., "data": ...}``;
the client unwraps ``data`` before these types apply.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# =============================================================================
# Requests
# =============================================================================


class ClusterCreateParams(TypedDict, total=False):
    """Body of POST /account/{id}/cluster."""

    accountCredentialId: int
    clusterName: str
    cloudProviderId: int
    regionId: int
    instanceId: int
    scyllaVersionId: int
    numberOfNodes: int
    replicationFactor: int
    broadcastType: str  # PRIVATE or PUBLIC
    cidrBlock: str
    userApiInterface: str  # CQL or ALTERNATOR
    alternatorWriteIsolation: str
    enableDnsAssociation: bool


class ClusterDeleteParams(TypedDict):
    clusterName: str


# =============================================================================
# Cluster responses
# =============================================================================


class ClusterRequestResponse(TypedDict):
    """Asynchronous job record."""

    id: int
    clusterId: int
    requestType: str  # CREATE_CLUSTER, DELETE_CLUSTER, ...
    status: str  # QUEUED, IN_PROGRESS, COMPLETED, FAILED, ...
    userFriendlyError: NotRequired[str | None]
    progressPercent: NotRequired[int]
    progressDescription: NotRequired[str]
    createdAt: NotRequired[str]


class NodeResponse(TypedDict):
    id: int
    status: str  # ACTIVE, PROVISIONING, ...
    privateIp: NotRequired[str]
    publicIp: NotRequired[str]
    datacenterId: NotRequired[int]


class DatacenterResponse(TypedDict):
    id: int
    name: str
    cidrBlock: str
    instanceId: int
    cloudProviderRegionId: NotRequired[int]
    status: NotRequired[str]


class RegionRef(TypedDict):
    id: int
    externalId: str
    name: NotRequired[str]


class ScyllaVersionRef(TypedDict):
    versionId: int
    version: str
    description: NotRequired[str]


class ClusterResponse(TypedDict):
    id: int
    clusterName: str
    status: str
    userApiInterface: str
    broadcastType: str
    dns: bool
    region: RegionRef
    scyllaVersion: ScyllaVersionRef
    datacenter: DatacenterResponse
    datacenters: NotRequired[list[DatacenterResponse]]
    nodes: NotRequired[list[NodeResponse]]
    replicationFactor: NotRequired[int]
    cloudProviderId: NotRequired[int]


# =============================================================================
# Deployment metadata
# =============================================================================


class CloudProviderResponse(TypedDict):
    id: int
    name: str  # AWS, GCP
    rootAccountId: NotRequired[str]


class RegionResponse(TypedDict):
    id: int
    cloudProviderId: int
    externalId: str  # us-east-1
    name: NotRequired[str]
    dcName: NotRequired[str]


class InstanceResponse(TypedDict):
    id: int
    cloudProviderId: int
    externalId: str  # i3.xlarge
    memory: NotRequired[int]
    localDiskCount: NotRequired[int]
    totalStorage: NotRequired[int]
    cpuCount: NotRequired[int]


class ProviderRegionsResponse(TypedDict):
    regions: list[RegionResponse]
    instances: list[InstanceResponse]


class ScyllaVersionsResponse(TypedDict):
    scyllaVersions: list[ScyllaVersionRef]
    defaultScyllaVersionId: int


class AccountResponse(TypedDict):
    accountId: int
    name: NotRequired[str]
