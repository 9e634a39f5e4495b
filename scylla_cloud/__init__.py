"""Declarative lifecycle management for ScyllaDB Cloud clusters.

Example:
    import scylla_cloud as sc

    config = sc.resolve_provider()
    async with sc.ScyllaCloudClient(config) as client:
        catalog = await sc.MetadataCatalog.load(client)
        resource = sc.ClusterResource(client, catalog, config.timeouts, config.poll_interval)
        data = sc.resolve_cluster("analytics")
        await resource.create(data)
"""

from scylla_cloud.api import ScyllaCloudClient
from scylla_cloud.catalog import MetadataCatalog
from scylla_cloud.config import ProviderConfig, ResourceTimeouts, resolve_cluster, resolve_provider
from scylla_cloud.errors import (
    DeleteRejectedError,
    MissingStateError,
    MultiDatacenterError,
    OperationTimeoutError,
    ProtocolError,
    ReconcileTimeoutError,
    RemoteCallError,
    RequestCardinalityError,
    ScyllaCloudError,
    UnrecognizedAttributeError,
    UnrecognizedRequestStatusError,
    UnsupportedOperationError,
    ValidationError,
)
from scylla_cloud.logging import LogConfig, setup_logging, teardown_logging
from scylla_cloud.projector import ClusterState, project
from scylla_cloud.reconcile import wait_for_request
from scylla_cloud.resolver import Resolution, resolve
from scylla_cloud.resource import ClusterResource, ResourceStatus
from scylla_cloud.schema import CLUSTER_SCHEMA, MemoryResourceData, ResourceData
from scylla_cloud.spec import ClusterSpec, UserApiInterface

__all__ = [
    "CLUSTER_SCHEMA",
    "ClusterResource",
    "ClusterSpec",
    "ClusterState",
    "DeleteRejectedError",
    "LogConfig",
    "MemoryResourceData",
    "MetadataCatalog",
    "MissingStateError",
    "MultiDatacenterError",
    "OperationTimeoutError",
    "ProtocolError",
    "ProviderConfig",
    "ReconcileTimeoutError",
    "RemoteCallError",
    "RequestCardinalityError",
    "Resolution",
    "ResourceData",
    "ResourceStatus",
    "ResourceTimeouts",
    "ScyllaCloudClient",
    "ScyllaCloudError",
    "UnrecognizedAttributeError",
    "UnrecognizedRequestStatusError",
    "UnsupportedOperationError",
    "UserApiInterface",
    "ValidationError",
    "project",
    "resolve",
    "resolve_cluster",
    "resolve_provider",
    "setup_logging",
    "teardown_logging",
    "wait_for_request",
]
