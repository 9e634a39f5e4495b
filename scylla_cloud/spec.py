"""Declared cluster specification.

Typed view of the attributes a user declares for a cluster. Every field is
fixed at creation time; changing any of them means replacing the cluster.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from scylla_cloud.errors import UnrecognizedAttributeError
from scylla_cloud.schema import ResourceData

DEFAULT_WRITE_ISOLATION = "only_rmw_uses_lwt"


class UserApiInterface(Enum):
    CQL = "CQL"
    ALTERNATOR = "ALTERNATOR"


@dataclass(frozen=True, slots=True)
class ClusterSpec:
    """Desired cluster attributes.

    `cidr_block` and `scylla_version` are None when the user did not supply
    them; the resolver then picks a default and reports it back.
    """

    name: str
    region: str
    node_count: int
    node_type: str
    user_api_interface: UserApiInterface = UserApiInterface.CQL
    alternator_write_isolation: str = DEFAULT_WRITE_ISOLATION
    cidr_block: str | None = None
    scylla_version: str | None = None
    enable_vpc_peering: bool = True
    enable_dns: bool = True

    @classmethod
    def from_data(cls, data: ResourceData) -> ClusterSpec:
        interface = data.get("user_api_interface")
        try:
            api = UserApiInterface(interface)
        except ValueError:
            raise UnrecognizedAttributeError("user_api_interface", interface) from None

        cidr, cidr_ok = data.get_ok("cidr_block")
        version, version_ok = data.get_ok("scylla_version")

        return cls(
            name=data.get("name"),
            region=data.get("region"),
            node_count=data.get("node_count"),
            node_type=data.get("node_type"),
            user_api_interface=api,
            alternator_write_isolation=data.get("alternator_write_isolation"),
            cidr_block=cidr if cidr_ok else None,
            scylla_version=version if version_ok else None,
            enable_vpc_peering=data.get("enable_vpc_peering"),
            enable_dns=data.get("enable_dns"),
        )
