"""Translate a declared ClusterSpec into a cluster creation request.

Pure function of a ClusterSpec and the metadata catalog: no network I/O, so every
failure here happens before anything is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass

from scylla_cloud.api.types import ClusterCreateParams
from scylla_cloud.catalog import MetadataCatalog
from scylla_cloud.errors import UnrecognizedAttributeError
from scylla_cloud.spec import ClusterSpec, UserApiInterface

DEFAULT_CIDR_BLOCK = "172.31.0.0/16"
REPLICATION_FACTOR = 3
ACCOUNT_CREDENTIAL_ID = 1


@dataclass(frozen=True, slots=True)
class Resolution:
    """Creation request plus the defaulted values to persist as observed."""

    request: ClusterCreateParams
    cidr_block: str
    scylla_version: str


def broadcast_type(enable_vpc_peering: bool) -> str:
    return "PRIVATE" if enable_vpc_peering else "PUBLIC"


def resolve(spec: ClusterSpec, catalog: MetadataCatalog) -> Resolution:
    """Resolve names to ids and apply defaults.

    Raises:
        UnrecognizedAttributeError: region, node_type or scylla_version has
            no catalog entry.
    """
    region = catalog.region_by_name(spec.region)
    if region is None:
        raise UnrecognizedAttributeError("region", spec.region)

    instance = catalog.instance_by_name(spec.node_type)
    if instance is None:
        raise UnrecognizedAttributeError("node_type", spec.node_type)

    if spec.scylla_version is None:
        version = catalog.default_version
    elif (found := catalog.version_by_name(spec.scylla_version)) is not None:
        version = found
    else:
        raise UnrecognizedAttributeError("scylla_version", spec.scylla_version)

    cidr = spec.cidr_block if spec.cidr_block is not None else DEFAULT_CIDR_BLOCK

    request: ClusterCreateParams = {
        "accountCredentialId": ACCOUNT_CREDENTIAL_ID,
        "clusterName": spec.name,
        "cloudProviderId": catalog.provider.id,
        "regionId": region.id,
        "instanceId": instance.id,
        "scyllaVersionId": version.id,
        "numberOfNodes": spec.node_count,
        "replicationFactor": REPLICATION_FACTOR,
        "broadcastType": broadcast_type(spec.enable_vpc_peering),
        "cidrBlock": cidr,
        "userApiInterface": spec.user_api_interface.value,
        "enableDnsAssociation": spec.enable_dns,
    }
    if spec.user_api_interface is UserApiInterface.ALTERNATOR:
        request["alternatorWriteIsolation"] = spec.alternator_write_isolation

    return Resolution(request=request, cidr_block=cidr, scylla_version=version.version)
