from __future__ import annotations

import asyncio

import pytest

from scylla_cloud.api.model import ClusterRequest
from scylla_cloud.config import ResourceTimeouts
from scylla_cloud.errors import (
    DeleteRejectedError,
    MissingStateError,
    MultiDatacenterError,
    OperationTimeoutError,
    ReconcileTimeoutError,
    RemoteCallError,
    RequestCardinalityError,
    ScyllaCloudAPIError,
    UnrecognizedAttributeError,
    UnrecognizedRequestStatusError,
    UnsupportedOperationError,
    ValidationError,
)
from scylla_cloud.resource import ClusterResource, ResourceStatus
from scylla_cloud.schema import CLUSTER_SCHEMA, MemoryResourceData

pytestmark = [pytest.mark.unit]


@pytest.fixture
def resource(api, catalog) -> ClusterResource:
    return ClusterResource(api, catalog, poll_interval=0)


def _state(**values) -> MemoryResourceData:
    return MemoryResourceData(CLUSTER_SCHEMA, values, id="42")


# ─── Create ──────────────────────────────────────────────────────────


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_records_ids_and_defaults(self, resource, api, declared):
        api.statuses = ["QUEUED", "IN_PROGRESS", "COMPLETED"]
        await resource.create(declared)

        assert declared.id == "42"
        assert declared.get("cluster_id") == 42
        assert declared.get("request_id") == 500
        assert declared.get("cidr_block") == "172.31.0.0/16"
        assert declared.get("scylla_version") == "5.2.0"
        assert declared.get("datacenter") == "AWS_US_EAST_1"
        assert declared.get("status") == "ACTIVE"
        assert resource.status is ResourceStatus.ACTIVE
        assert [name for name, _ in api.calls] == [
            "create_cluster",
            "get_cluster_request",
            "get_cluster_request",
            "get_cluster_request",
            "get_cluster",
        ]

    @pytest.mark.asyncio
    async def test_create_submits_resolved_request(self, resource, api, declared):
        declared.set("enable_vpc_peering", False)
        await resource.create(declared)
        _, (params,) = api.calls[0]
        assert params["regionId"] == 1
        assert params["instanceId"] == 10
        assert params["scyllaVersionId"] == 101
        assert params["broadcastType"] == "PUBLIC"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("attribute", "value"),
        [("region", "nowhere"), ("node_type", "x1.tiny"), ("scylla_version", "9.9.9")],
    )
    async def test_unresolvable_name_makes_no_remote_call(
        self, resource, api, declared, attribute, value,
    ):
        declared.set(attribute, value)
        with pytest.raises(UnrecognizedAttributeError) as exc_info:
            await resource.create(declared)
        assert exc_info.value.attribute == attribute
        assert api.calls == []
        assert declared.id == ""

    @pytest.mark.asyncio
    async def test_unknown_interface_rejected(self, resource, api, declared):
        declared.set("user_api_interface", "GRAPHQL")
        with pytest.raises(UnrecognizedAttributeError, match="user_api_interface"):
            await resource.create(declared)
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_submit_error_is_wrapped(self, resource, api, declared):
        api.errors["create_cluster"] = ScyllaCloudAPIError("API error 400: bad", status=400)
        with pytest.raises(RemoteCallError, match="^error creating cluster: API error 400"):
            await resource.create(declared)
        assert resource.status is ResourceStatus.FAILED

    @pytest.mark.asyncio
    async def test_ids_recorded_before_waiting(self, resource, api, declared):
        api.statuses = ["QUEUED", "ROLLED_BACK"]
        with pytest.raises(UnrecognizedRequestStatusError):
            await resource.create(declared)
        assert declared.id == "42"
        assert declared.get("request_id") == 500

    @pytest.mark.asyncio
    async def test_create_timeout(self, api, catalog, declared):
        api.statuses = ["QUEUED"]
        resource = ClusterResource(
            api, catalog, ResourceTimeouts(create=0.1), poll_interval=0.01,
        )
        with pytest.raises(ReconcileTimeoutError):
            await resource.create(declared)
        assert resource.status is ResourceStatus.FAILED
        assert api.called("get_cluster") == 0

    @pytest.mark.asyncio
    async def test_final_read_bounded_by_create_deadline(self, api, catalog, declared):
        async def hanging_get_cluster(cluster_id):
            await asyncio.sleep(3600)

        api.get_cluster = hanging_get_cluster
        resource = ClusterResource(api, catalog, ResourceTimeouts(create=0.1), poll_interval=0)
        with pytest.raises(OperationTimeoutError, match="create timed out"):
            await resource.create(declared)
        assert declared.get("request_id") == 500
        assert resource.status is ResourceStatus.FAILED


# ─── Read ────────────────────────────────────────────────────────────


class TestRead:
    @pytest.mark.asyncio
    async def test_read_projects_state(self, resource, api):
        data = _state()
        await resource.read(data)
        assert data.get("name") == "analytics"
        assert data.get("node_count") == 3
        assert data.get("request_id") == 500
        assert api.calls[0] == ("list_cluster_requests", (42, "CREATE_CLUSTER"))
        assert api.called("get_cluster_request") == 0

    @pytest.mark.asyncio
    async def test_read_resumes_pending_create(self, resource, api):
        api.create_requests = [ClusterRequest(500, 42, "CREATE_CLUSTER", "IN_PROGRESS")]
        api.statuses = ["IN_PROGRESS", "COMPLETED"]
        data = _state()
        await resource.read(data)
        assert api.called("get_cluster_request") == 2
        assert data.get("status") == "ACTIVE"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 2])
    async def test_read_requires_exactly_one_create_request(self, resource, api, count):
        api.create_requests = [
            ClusterRequest(500 + i, 42, "CREATE_CLUSTER", "COMPLETED") for i in range(count)
        ]
        with pytest.raises(RequestCardinalityError) as exc_info:
            await resource.read(_state())
        assert exc_info.value.count == count
        assert api.called("get_cluster") == 0

    @pytest.mark.asyncio
    async def test_read_rejects_multi_datacenter(self, resource, api, make_cluster, make_datacenter):
        dcs = (make_datacenter(), make_datacenter(id=8))
        api.cluster = make_cluster(datacenters=dcs)
        with pytest.raises(MultiDatacenterError):
            await resource.read(_state())

    @pytest.mark.asyncio
    async def test_read_rejects_malformed_id(self, resource, api):
        data = MemoryResourceData(CLUSTER_SCHEMA, id="not-a-number")
        with pytest.raises(ValidationError, match="not-a-number"):
            await resource.read(data)
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_read_error_is_wrapped(self, resource, api):
        api.errors["get_cluster"] = ScyllaCloudAPIError("API error 404: gone", status=404)
        with pytest.raises(RemoteCallError, match="^error reading cluster: "):
            await resource.read(_state())

    @pytest.mark.asyncio
    async def test_create_then_read_is_stable(self, resource, api, declared):
        await resource.create(declared)
        before = declared.state()
        await resource.read(declared)
        assert declared.state() == before

    @pytest.mark.asyncio
    async def test_import_state(self, resource):
        data = await resource.import_state("42")
        assert data.id == "42"
        assert data.get("cluster_id") == 42
        assert data.get("node_type") == "i3.xlarge"


# ─── Update ──────────────────────────────────────────────────────────


class TestUpdate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("attribute", "value"),
        [("node_count", 6), ("enable_dns", False), ("name", "renamed")],
    )
    async def test_update_always_fails(self, resource, api, attribute, value):
        prior = {"name": "analytics", "node_count": 3, "enable_dns": True}
        data = MemoryResourceData(CLUSTER_SCHEMA, prior, id="42", prior=prior)
        data.set(attribute, value)
        assert data.changed() == [attribute]
        with pytest.raises(UnsupportedOperationError, match='"scylla_cluster" resource is not supported'):
            await resource.update(data)
        assert api.calls == []


# ─── Delete ──────────────────────────────────────────────────────────


class TestDelete:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["QUEUED", "IN_PROGRESS", "in_progress"])
    async def test_accepted_statuses(self, resource, api, status):
        api.delete_result = ClusterRequest(501, 42, "DELETE_CLUSTER", status)
        data = _state(name="analytics")
        await resource.delete(data)
        assert api.calls == [("delete_cluster", (42, "analytics"))]
        assert data.id == ""
        assert resource.status is ResourceStatus.ABSENT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["REJECTED", "FAILED", "COMPLETED"])
    async def test_other_status_surfaces_user_error(self, resource, api, status):
        api.delete_result = ClusterRequest(
            501, 42, "DELETE_CLUSTER", status, "Cluster has active VPC peerings",
        )
        with pytest.raises(DeleteRejectedError) as exc_info:
            await resource.delete(_state(name="analytics"))
        assert str(exc_info.value) == "Cluster has active VPC peerings"
        assert exc_info.value.status == status
        assert resource.status is ResourceStatus.FAILED

    @pytest.mark.asyncio
    async def test_delete_does_not_poll(self, resource, api):
        await resource.delete(_state(name="analytics"))
        assert api.called("get_cluster_request") == 0

    @pytest.mark.asyncio
    async def test_delete_requires_name(self, resource, api):
        with pytest.raises(MissingStateError) as exc_info:
            await resource.delete(_state())
        assert exc_info.value.attribute == "name"
        assert api.calls == []

    @pytest.mark.asyncio
    async def test_delete_error_is_wrapped(self, resource, api):
        api.errors["delete_cluster"] = ScyllaCloudAPIError("API error 0: reset", status=0)
        with pytest.raises(RemoteCallError, match="^error deleting cluster: "):
            await resource.delete(_state(name="analytics"))

    @pytest.mark.asyncio
    async def test_delete_deadline(self, catalog):
        class _Hanging:
            async def delete_cluster(self, cluster_id, name):
                await asyncio.sleep(3600)

        resource = ClusterResource(_Hanging(), catalog, ResourceTimeouts(delete=0.05))  # type: ignore[arg-type]
        with pytest.raises(OperationTimeoutError, match="delete timed out"):
            await resource.delete(_state(name="analytics"))
