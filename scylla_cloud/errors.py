"""Error taxonomy for cluster lifecycle operations.

Four families, each surfaced to the caller and never suppressed:

- ValidationError: bad declared input or missing state prerequisites.
  Raised before any network call is made.
- RemoteCallError: a transport or API failure, wrapped with the operation
  that was being attempted ("error creating cluster: ...").
- ProtocolError: the remote API answered with something outside its
  contract (unknown status, unexpected cardinality). Never retried.
- ReconcileTimeoutError: the enclosing operation deadline elapsed while
  waiting for a request to finish.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class ScyllaCloudError(Exception):
    """Base class for every error raised by scylla_cloud."""


# =============================================================================
# Validation
# =============================================================================


class ValidationError(ScyllaCloudError):
    """Declared input or resource state is not usable."""


class UnrecognizedAttributeError(ValidationError):
    """A human-readable attribute value has no catalog entry."""

    def __init__(self, attribute: str, value: object) -> None:
        self.attribute = attribute
        self.value = value
        super().__init__(f'unrecognized value {value!r} for "{attribute}" attribute')


class MissingStateError(ValidationError):
    """An attribute required by the operation is absent from state."""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        super().__init__(f'unable to read cluster "{attribute}" from state')


# =============================================================================
# Remote calls
# =============================================================================


class ScyllaCloudAPIError(ScyllaCloudError):
    """Error from the ScyllaDB Cloud API."""

    def __init__(self, message: str, status: int = 0) -> None:
        self.status = status
        super().__init__(message)


class RemoteCallError(ScyllaCloudError):
    """A remote call failed; the message carries the operation context."""


# =============================================================================
# Protocol
# =============================================================================


class ProtocolError(ScyllaCloudError):
    """The remote API violated its contract."""


class UnrecognizedRequestStatusError(ProtocolError):
    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"unrecognized cluster request status: {status!r}")


class RequestCardinalityError(ProtocolError):
    def __init__(self, cluster_id: int, count: int) -> None:
        self.cluster_id = cluster_id
        self.count = count
        super().__init__(
            f"unexpected number of cluster requests for cluster {cluster_id}, "
            f"expected 1, got: {count}"
        )


class MultiDatacenterError(ProtocolError):
    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"multi-datacenter clusters are not currently supported: {count}")


# =============================================================================
# Lifecycle
# =============================================================================


class OperationTimeoutError(ScyllaCloudError, TimeoutError):
    """The operation deadline elapsed; remote state is unknown."""

    def __init__(self, message: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(message)


class ReconcileTimeoutError(OperationTimeoutError):
    """Request did not complete before the operation deadline."""

    def __init__(self, request_id: int, timeout: float) -> None:
        self.request_id = request_id
        super().__init__(
            f"timeout waiting for cluster request {request_id} after {timeout:.1f}s", timeout,
        )


@contextmanager
def remote_call(context: str) -> Iterator[None]:
    """Wrap API and transport failures with the operation being attempted."""
    try:
        yield
    except (ScyllaCloudAPIError, TimeoutError) as e:
        if isinstance(e, OperationTimeoutError):
            raise
        raise RemoteCallError(f"{context}: {e}") from e


class DeleteRejectedError(ScyllaCloudError):
    """Delete was not accepted; the message is the remote user-facing error."""

    def __init__(self, message: str, status: str) -> None:
        self.status = status
        super().__init__(message)


class UnsupportedOperationError(ScyllaCloudError):
    def __init__(self) -> None:
        super().__init__('updating "scylla_cluster" resource is not supported')


__all__ = [
    "DeleteRejectedError",
    "MissingStateError",
    "MultiDatacenterError",
    "OperationTimeoutError",
    "ProtocolError",
    "ReconcileTimeoutError",
    "RemoteCallError",
    "RequestCardinalityError",
    "ScyllaCloudAPIError",
    "ScyllaCloudError",
    "UnrecognizedAttributeError",
    "UnrecognizedRequestStatusError",
    "UnsupportedOperationError",
    "ValidationError",
    "remote_call",
]
