"""Lifecycle of a ScyllaDB Cloud cluster resource.

ClusterResource sequences the resolver, the API client, the request
reconciliation loop and the state projector into the create, read, update
and delete entry points the declarative tool calls:

    absent -> creating -> polling -> active -> deleting -> absent
                  \\           \\                   \\
                   +-----------+-------------------+--> failed

There is no updating state. The API does not allow changing an existing
cluster, so update always fails without touching the remote side.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum
from typing import Protocol

from loguru import logger

from scylla_cloud.api.model import CREATE_CLUSTER, Cluster, ClusterRequest
from scylla_cloud.api.types import ClusterCreateParams
from scylla_cloud.catalog import MetadataCatalog
from scylla_cloud.config import ResourceTimeouts
from scylla_cloud.errors import (
    DeleteRejectedError,
    MissingStateError,
    OperationTimeoutError,
    RequestCardinalityError,
    UnsupportedOperationError,
    ValidationError,
    remote_call,
)
from scylla_cloud.projector import project
from scylla_cloud.reconcile import POLL_INTERVAL, wait_for_request
from scylla_cloud.resolver import resolve
from scylla_cloud.schema import CLUSTER_SCHEMA, MemoryResourceData, ResourceData
from scylla_cloud.spec import ClusterSpec


class ClusterAPI(Protocol):
    async def create_cluster(self, params: ClusterCreateParams) -> ClusterRequest: ...
    async def get_cluster(self, cluster_id: int) -> Cluster: ...
    async def get_cluster_request(self, request_id: int) -> ClusterRequest: ...
    async def list_cluster_requests(
        self, cluster_id: int, request_type: str | None = None,
    ) -> list[ClusterRequest]: ...
    async def delete_cluster(self, cluster_id: int, name: str) -> ClusterRequest: ...


class ResourceStatus(Enum):
    ABSENT = "absent"
    CREATING = "creating"
    POLLING = "polling"
    ACTIVE = "active"
    DELETING = "deleting"
    FAILED = "failed"


def _parse_id(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"error reading id={value!r}: not a cluster id") from None


@asynccontextmanager
async def _deadline(operation: str, timeout: float) -> AsyncIterator[None]:
    cm = asyncio.timeout(timeout)
    try:
        async with cm:
            yield
    except TimeoutError as e:
        if isinstance(e, OperationTimeoutError) or not cm.expired():
            raise
        raise OperationTimeoutError(f"{operation} timed out after {timeout:.1f}s", timeout) from e


class ClusterResource:
    """Create, read, update and delete one cluster.

    The remote API is the only source of truth; nothing is cached between
    calls apart from the status used for logging.

    Args:
        client: ScyllaDB Cloud API client.
        catalog: Metadata lookups, loaded once by the caller.
        timeouts: Operation deadlines.
        poll_interval: Seconds between request status polls.
    """

    def __init__(
        self,
        client: ClusterAPI,
        catalog: MetadataCatalog,
        timeouts: ResourceTimeouts | None = None,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._client = client
        self._catalog = catalog
        self._timeouts = timeouts or ResourceTimeouts()
        self._poll_interval = poll_interval
        self.status = ResourceStatus.ABSENT
        self._log = logger.bind(component="resource")

    @property
    def timeouts(self) -> ResourceTimeouts:
        return self._timeouts

    def _transition(self, status: ResourceStatus) -> None:
        self._log.debug("{old} -> {new}", old=self.status.value, new=status.value)
        self.status = status

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[None]:
        try:
            yield
        except BaseException:
            self._transition(ResourceStatus.FAILED)
            self._log.debug("{operation} failed", operation=name)
            raise

    # =========================================================================
    # Create
    # =========================================================================

    async def create(self, data: ResourceData) -> None:
        """Resolve, submit, wait for completion and record the cluster.

        The cluster and request ids are written to `data` as soon as the
        request is accepted, so an interrupted create can be resumed by read.
        """
        spec = ClusterSpec.from_data(data)
        resolution = resolve(spec, self._catalog)

        async with self._operation("create"):
            self._transition(ResourceStatus.CREATING)
            data.set("cidr_block", resolution.cidr_block)
            data.set("scylla_version", resolution.scylla_version)

            loop = asyncio.get_running_loop()
            deadline = loop.time() + self._timeouts.create

            async with _deadline("create", self._timeouts.create):
                with remote_call("error creating cluster"):
                    request = await self._client.create_cluster(resolution.request)

            log = self._log.bind(cluster_id=request.cluster_id, request_id=request.id)
            log.info("Cluster {name} submitted", name=spec.name)

            data.set_id(str(request.cluster_id))
            data.set("cluster_id", request.cluster_id)
            data.set("request_id", request.id)

            self._transition(ResourceStatus.POLLING)
            await wait_for_request(
                self._client,
                request.id,
                timeout=max(deadline - loop.time(), 0.0),
                interval=self._poll_interval,
            )

            async with _deadline("create", max(deadline - loop.time(), 0.0)):
                with remote_call("error reading cluster"):
                    cluster = await self._client.get_cluster(request.cluster_id)

            data.set("datacenter", cluster.datacenter.name)
            data.set("status", cluster.status)
            self._transition(ResourceStatus.ACTIVE)
            log.info("Cluster {name} active", name=spec.name)

    # =========================================================================
    # Read
    # =========================================================================

    async def read(self, data: ResourceData) -> None:
        """Refresh `data` from the remote cluster.

        The creation request is looked up again on every read rather than
        taken from state. If it has not completed yet, read waits for it.
        """
        cluster_id = _parse_id(data.id)

        async with self._operation("read"):
            with remote_call("error reading cluster request"):
                requests = await self._client.list_cluster_requests(cluster_id, CREATE_CLUSTER)
            if len(requests) != 1:
                raise RequestCardinalityError(cluster_id, len(requests))
            request = requests[0]

            if not request.is_completed:
                self._transition(ResourceStatus.POLLING)
                await wait_for_request(
                    self._client,
                    request.id,
                    timeout=self._timeouts.create,
                    interval=self._poll_interval,
                )

            with remote_call("error reading cluster"):
                cluster = await self._client.get_cluster(cluster_id)

            project(cluster, self._catalog, request.id).apply(data)
            self._transition(ResourceStatus.ACTIVE)

    async def import_state(self, cluster_id: str) -> MemoryResourceData:
        """Adopt an existing cluster by id."""
        data = MemoryResourceData(CLUSTER_SCHEMA, id=cluster_id)
        await self.read(data)
        return data

    # =========================================================================
    # Update / Delete
    # =========================================================================

    async def update(self, data: ResourceData) -> None:
        changed = data.changed() if isinstance(data, MemoryResourceData) else []
        self._log.warning(
            "Update of cluster {id} rejected (changed: {changed})",
            id=data.id, changed=", ".join(changed) or "-",
        )
        raise UnsupportedOperationError()

    async def delete(self, data: ResourceData) -> None:
        """Submit deletion and confirm the API accepted it.

        Does not wait for the deletion to finish.
        """
        cluster_id = _parse_id(data.id)
        name, ok = data.get_ok("name")
        if not ok:
            raise MissingStateError("name")

        async with self._operation("delete"):
            self._transition(ResourceStatus.DELETING)
            async with _deadline("delete", self._timeouts.delete):
                with remote_call("error deleting cluster"):
                    result = await self._client.delete_cluster(cluster_id, name)

            if not result.is_pending:
                raise DeleteRejectedError(result.user_friendly_error, result.status)

            self._log.info(
                "Cluster {cluster_id} deletion accepted ({status})",
                cluster_id=cluster_id, status=result.status,
            )
            data.set_id("")
            self._transition(ResourceStatus.ABSENT)
