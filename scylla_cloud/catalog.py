"""Deployment metadata lookups.

Maps human-readable identifiers (region name, instance type, Scylla
version) to the numeric ids the cluster API expects, and back. A catalog
is loaded once by the application and passed explicitly to the resolver
and projector; it is never refreshed behind their back.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from scylla_cloud.api.model import CloudProvider, Instance, Region, ScyllaVersion
from scylla_cloud.errors import ProtocolError

if TYPE_CHECKING:
    from scylla_cloud.api.client import ScyllaCloudClient

DEFAULT_PROVIDER = "AWS"


@dataclass(frozen=True, slots=True)
class MetadataCatalog:
    provider: CloudProvider
    regions: tuple[Region, ...]
    instances: tuple[Instance, ...]
    versions: tuple[ScyllaVersion, ...]
    default_version_id: int
    _regions_by_name: dict[str, Region] = field(init=False, repr=False, compare=False)
    _regions_by_id: dict[int, Region] = field(init=False, repr=False, compare=False)
    _instances_by_name: dict[str, Instance] = field(init=False, repr=False, compare=False)
    _instances_by_id: dict[int, Instance] = field(init=False, repr=False, compare=False)
    _versions_by_name: dict[str, ScyllaVersion] = field(init=False, repr=False, compare=False)
    _versions_by_id: dict[int, ScyllaVersion] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_regions_by_name", {r.external_id: r for r in self.regions})
        object.__setattr__(self, "_regions_by_id", {r.id: r for r in self.regions})
        object.__setattr__(self, "_instances_by_name", {i.external_id: i for i in self.instances})
        object.__setattr__(self, "_instances_by_id", {i.id: i for i in self.instances})
        object.__setattr__(self, "_versions_by_name", {v.version: v for v in self.versions})
        object.__setattr__(self, "_versions_by_id", {v.id: v for v in self.versions})

    @classmethod
    def build(
        cls,
        provider: CloudProvider,
        regions: Iterable[Region],
        instances: Iterable[Instance],
        versions: Iterable[ScyllaVersion],
        default_version_id: int,
    ) -> MetadataCatalog:
        return cls(
            provider=provider,
            regions=tuple(regions),
            instances=tuple(instances),
            versions=tuple(versions),
            default_version_id=default_version_id,
        )

    @classmethod
    async def load(
        cls, client: ScyllaCloudClient, provider: str = DEFAULT_PROVIDER,
    ) -> MetadataCatalog:
        """Fetch providers, regions, instance types and versions."""
        log = logger.bind(component="catalog")

        providers = await client.list_cloud_providers()
        match [p for p in providers if p.name.upper() == provider.upper()]:
            case [found]:
                cloud = found
            case []:
                raise ValueError(
                    f"Cloud provider '{provider}' not offered. "
                    f"Available: {', '.join(p.name for p in providers) or 'none'}"
                )
            case many:
                raise ValueError(f"Cloud provider '{provider}' is ambiguous: {len(many)} matches")

        regions, instances = await client.list_regions(cloud.id)
        versions, default_id = await client.list_scylla_versions()

        log.info(
            "Loaded {provider} catalog: {regions} regions, {instances} instance types, "
            "{versions} versions",
            provider=cloud.name, regions=len(regions), instances=len(instances),
            versions=len(versions),
        )
        return cls.build(cloud, regions, instances, versions, default_id)

    def region_by_name(self, name: str) -> Region | None:
        return self._regions_by_name.get(name)

    def region_by_id(self, region_id: int) -> Region | None:
        return self._regions_by_id.get(region_id)

    def instance_by_name(self, name: str) -> Instance | None:
        return self._instances_by_name.get(name)

    def instance_by_id(self, instance_id: int) -> Instance | None:
        return self._instances_by_id.get(instance_id)

    def version_by_name(self, name: str) -> ScyllaVersion | None:
        return self._versions_by_name.get(name)

    def version_by_id(self, version_id: int) -> ScyllaVersion | None:
        return self._versions_by_id.get(version_id)

    @property
    def default_version(self) -> ScyllaVersion:
        version = self.version_by_id(self.default_version_id)
        if version is None:
            raise ProtocolError(
                f"default Scylla version {self.default_version_id} is not in the catalog"
            )
        return version
