"""
Content type listing.
"""

import asyncio
from typing import Any, Dict, Mapping, Optional

from .config import get_logger
from .core.remote import build_content_type_params, parse_content_types_response
from .dispatcher import Dispatcher, OutcomeHandler, deliver_outcome
from .exceptions import DeliveryError
from .models import ContentTypesResult, Outcome, RequestDescriptor, RequestKind

logger = get_logger("content_types")

CONTENT_TYPES_RESOURCE = "content_types"


class ContentTypeLister:
    """Lists content types with a single request; no pagination."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        headers: Mapping[str, str],
        environment: Optional[str] = None,
    ):
        self._dispatcher = dispatcher
        self._headers = dict(headers)
        self._environment = environment

    def build_params(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return build_content_type_params(params, self._environment)

    def _build_descriptor(self, params: Optional[Dict[str, Any]]) -> RequestDescriptor:
        return RequestDescriptor(
            resource_path=CONTENT_TYPES_RESOURCE,
            headers=self._headers,
            query_params=self.build_params(params),
        )

    async def fetch(
        self, params: Optional[Dict[str, Any]] = None
    ) -> Outcome[ContentTypesResult]:
        """Request the listing and parse it."""
        outcome = await self._dispatcher.send(
            self._build_descriptor(params), RequestKind.CONTENT_TYPES
        )
        return self._parse(outcome)

    def _parse(self, outcome: Outcome[Dict[str, Any]]) -> Outcome[ContentTypesResult]:
        if not outcome.ok:
            return Outcome.failure(outcome.error)
        try:
            result = parse_content_types_response(outcome.value)
        except DeliveryError as e:
            logger.warning("Content type listing malformed: %s", e.message)
            return Outcome.failure(e)
        logger.debug("Listed %d content type(s)", len(result.content_types))
        return Outcome.success(result)

    def list(
        self,
        params: Optional[Dict[str, Any]],
        handler: Optional[OutcomeHandler],
    ) -> Optional["asyncio.Task[None]"]:
        """Schedule the listing and hand its single outcome to `handler`."""
        if handler is None:
            logger.debug("Skipping content type listing: no completion handler")
            return None

        async def forward(outcome: Outcome[Dict[str, Any]]) -> None:
            await deliver_outcome(handler, self._parse(outcome))

        return self._dispatcher.dispatch(
            self._build_descriptor(params), RequestKind.CONTENT_TYPES, forward
        )
