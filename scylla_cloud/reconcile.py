"""Wait for an asynchronous cluster request to complete.

The API answers mutating calls with a request record and finishes the work
in the background. `wait_for_request` polls that record on a fixed interval
until it reports COMPLETED.

Status handling is case-insensitive:

- COMPLETED: done.
- QUEUED, IN_PROGRESS: keep polling.
- anything else: UnrecognizedRequestStatusError, not retried.

A failed poll is not retried either; it surfaces as RemoteCallError. The
deadline belongs to the calling operation and is passed in as `timeout`.
When it elapses, including in the middle of a poll, the wait is abandoned
with ReconcileTimeoutError and the remote request is left as it is.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_delay,
    wait_fixed,
)

from scylla_cloud.api.model import ClusterRequest
from scylla_cloud.errors import (
    ReconcileTimeoutError,
    UnrecognizedRequestStatusError,
    remote_call,
)

POLL_INTERVAL = 10.0


class RequestSource(Protocol):
    async def get_cluster_request(self, request_id: int) -> ClusterRequest: ...


class _RequestPendingError(Exception):
    """Request still queued or in progress - retry."""


async def _poll(client: RequestSource, request_id: int) -> ClusterRequest:
    with remote_call("error reading cluster request"):
        request = await client.get_cluster_request(request_id)

    if request.is_completed:
        return request
    if request.is_pending:
        raise _RequestPendingError(request.status)
    raise UnrecognizedRequestStatusError(request.status)


async def wait_for_request(
    client: RequestSource,
    request_id: int,
    *,
    timeout: float,
    interval: float = POLL_INTERVAL,
) -> ClusterRequest:
    """Block until request `request_id` is COMPLETED.

    Args:
        client: Anything exposing `get_cluster_request`.
        request_id: Id of the request to watch.
        timeout: Deadline in seconds, set by the calling operation.
        interval: Seconds between polls.

    Returns:
        The completed request.

    Raises:
        UnrecognizedRequestStatusError: Request left QUEUED/IN_PROGRESS for
            anything other than COMPLETED.
        RemoteCallError: A poll failed.
        ReconcileTimeoutError: The deadline elapsed first.
    """
    log = logger.bind(component="reconcile", request_id=request_id)
    log.debug("Waiting for request (timeout={timeout}s)", timeout=timeout)

    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            async for attempt in AsyncRetrying(
                stop=stop_after_delay(timeout),
                wait=wait_fixed(interval),
                retry=retry_if_exception_type(_RequestPendingError),
            ):
                with attempt:
                    log.trace("Poll #{n}", n=attempt.retry_state.attempt_number)
                    request = await _poll(client, request_id)
    except RetryError as e:
        raise ReconcileTimeoutError(request_id, timeout) from e
    except TimeoutError as e:
        if deadline.expired():
            raise ReconcileTimeoutError(request_id, timeout) from e
        raise

    log.info("Request {request_id} completed", request_id=request_id)
    return request
