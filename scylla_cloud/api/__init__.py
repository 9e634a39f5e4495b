from scylla_cloud.api.client import ScyllaCloudClient
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

__all__ = [
    "CloudProvider",
    "Cluster",
    "ClusterRequest",
    "Datacenter",
    "Instance",
    "Node",
    "Region",
    "ScyllaCloudClient",
    "ScyllaVersion",
]
