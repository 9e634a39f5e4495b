"""Project a fetched cluster onto the flat declared attribute set."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from scylla_cloud.api.model import Cluster, nodes_by_status
from scylla_cloud.catalog import MetadataCatalog
from scylla_cloud.errors import MultiDatacenterError, ProtocolError
from scylla_cloud.schema import ResourceData


@dataclass(frozen=True, slots=True)
class ClusterState:
    """Persisted record of a cluster: declared attributes plus computed ones."""

    cluster_id: int
    name: str
    region: str
    node_count: int
    user_api_interface: str
    node_type: str
    cidr_block: str
    scylla_version: str
    enable_vpc_peering: bool
    enable_dns: bool
    request_id: int
    datacenter: str
    status: str

    def apply(self, data: ResourceData) -> None:
        for name, value in asdict(self).items():
            data.set(name, value)


def project(cluster: Cluster, catalog: MetadataCatalog, request_id: int) -> ClusterState:
    """Build the persisted state for `cluster`.

    Only ACTIVE nodes count towards `node_count`. Peering is reported as
    enabled unless the broadcast type is PUBLIC.

    Raises:
        MultiDatacenterError: The cluster spans more than one datacenter.
        ProtocolError: The datacenter's instance type is not in the catalog.
    """
    if (n := len(cluster.datacenters)) > 1:
        raise MultiDatacenterError(n)

    dc = cluster.datacenter
    instance = catalog.instance_by_id(dc.instance_id)
    if instance is None:
        raise ProtocolError(f"cluster {cluster.id} uses unknown instance id {dc.instance_id}")

    return ClusterState(
        cluster_id=cluster.id,
        name=cluster.name,
        region=cluster.region_external_id,
        node_count=len(nodes_by_status(cluster.nodes, "ACTIVE")),
        user_api_interface=cluster.user_api_interface,
        node_type=instance.external_id,
        cidr_block=dc.cidr_block,
        scylla_version=cluster.scylla_version,
        enable_vpc_peering=cluster.broadcast_type.upper() != "PUBLIC",
        enable_dns=cluster.dns,
        request_id=request_id,
        datacenter=dc.name,
        status=cluster.status,
    )
