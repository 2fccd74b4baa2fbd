"""
Asynchronous request dispatch for the delivery API.

Every network-bound operation goes through Dispatcher. It issues exactly one
HTTP call per request, never retries, and turns whatever happened into a
single Outcome: the decoded payload, or a classified DeliveryError.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

import httpx

from .config import get_logger
from .core.remote import (
    decode_json_body,
    extract_error_details,
    is_error_payload,
    map_request_exception,
    parse_http_error_response,
)
from .exceptions import DeliveryError, ServerError
from .models import Outcome, RequestDescriptor, RequestKind

logger = get_logger("dispatcher")

OutcomeHandler = Callable[[Outcome[Any]], Union[None, Awaitable[None]]]


async def deliver_outcome(handler: OutcomeHandler, outcome: Outcome[Any]) -> None:
    """Call a plain or coroutine handler with an outcome."""
    result = handler(outcome)
    if inspect.isawaitable(result):
        await result


class Dispatcher:
    """Sends described requests and routes one outcome per request."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._tasks: Set["asyncio.Task[None]"] = set()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def send(
        self, descriptor: RequestDescriptor, request_kind: RequestKind
    ) -> Outcome[Dict[str, Any]]:
        """Issue one request and classify the result.

        Never raises for network or server problems; those come back as a
        failed Outcome. A 2xx body that is not a JSON object is a
        ProtocolError rather than a ServerError: the server claimed success.
        """
        logger.debug(
            "Dispatching %s request to %s with params %s",
            request_kind.value,
            descriptor.resource_path,
            sorted(descriptor.query_params),
        )
        try:
            response = await self._client.get(
                descriptor.resource_path.lstrip("/"),
                headers=dict(descriptor.headers),
                params=dict(descriptor.query_params),
            )
        except (httpx.RequestError, OSError) as e:
            error = map_request_exception(e)
            error.details["request_kind"] = request_kind.value
            logger.warning("%s request failed: %s", request_kind.value, error.message)
            return Outcome.failure(error)

        return self._classify_response(response, request_kind)

    def _classify_response(
        self, response: httpx.Response, request_kind: RequestKind
    ) -> Outcome[Dict[str, Any]]:
        body = response.content
        if not response.is_success:
            error: DeliveryError = parse_http_error_response(
                response.status_code, body, response.reason_phrase
            )
            logger.warning(
                "%s request returned HTTP %d", request_kind.value, response.status_code
            )
            return Outcome.failure(error)

        try:
            payload = decode_json_body(body)
        except DeliveryError as e:
            e.status_code = response.status_code
            logger.warning("%s response unparseable: %s", request_kind.value, e.message)
            return Outcome.failure(e)

        if is_error_payload(payload):
            message, details = extract_error_details(payload)
            return Outcome.failure(ServerError(message, details, response.status_code))

        return Outcome.success(payload)

    def dispatch(
        self,
        descriptor: RequestDescriptor,
        request_kind: RequestKind,
        handler: Optional[OutcomeHandler],
    ) -> Optional["asyncio.Task[None]"]:
        """Schedule a request and return without waiting for it.

        The handler receives exactly one Outcome. Without a handler nothing
        is sent and None is returned. Must be called with a running event
        loop; the returned task finishes once the handler has run.
        """
        if handler is None:
            logger.debug(
                "Skipping %s request to %s: no completion handler",
                request_kind.value,
                descriptor.resource_path,
            )
            return None

        task = asyncio.get_running_loop().create_task(
            self._send_and_deliver(descriptor, request_kind, handler)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send_and_deliver(
        self,
        descriptor: RequestDescriptor,
        request_kind: RequestKind,
        handler: OutcomeHandler,
    ) -> None:
        outcome = await self.send(descriptor, request_kind)
        await deliver_outcome(handler, outcome)
