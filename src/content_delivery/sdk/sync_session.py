"""
Paginated synchronization against the sync endpoint.

A SyncSession drives one logical sync: it sends the initial request, follows
pagination tokens one page at a time, and finishes when a page carries a sync
token. The caller gets exactly one terminal Outcome. Pages can also be
streamed through `on_page` as they arrive.

A session never checks for cancellation between pages. Once started it keeps
fetching until the server hands back a sync token or a request fails.
"""

import asyncio
import inspect
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from .config import get_logger
from .core.remote import parse_sync_page
from .core.sync_params import build_sync_params, describe_sync_params
from .dispatcher import Dispatcher, OutcomeHandler, deliver_outcome
from .exceptions import DeliveryError, UsageError
from .models import (
    Outcome,
    RequestDescriptor,
    RequestKind,
    SyncPage,
    SyncResult,
    SyncState,
)

logger = get_logger("sync_session")

SYNC_RESOURCE = "stacks/sync"

PageHandler = Callable[[SyncPage], Union[None, Awaitable[None]]]


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_PAGE = "awaiting_page"
    DONE = "done"
    FAILED = "failed"


class SyncSession:
    """
    State machine for one sync, from first request to sync token.

    Examples:
        Awaiting the result:
        >>> session = SyncSession(dispatcher, SyncState.init(), headers)
        >>> outcome = await session.run()
        >>> result = outcome.unwrap()

        Callback style:
        >>> session.start(lambda outcome: print(outcome.ok))

        Resuming after a failure:
        >>> token = session.last_pagination_token
        >>> retry = SyncSession(dispatcher, SyncState.from_pagination_token(token), headers)
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        state: SyncState,
        headers: Mapping[str, str],
        environment: Optional[str] = None,
        on_page: Optional[PageHandler] = None,
    ):
        self._dispatcher = dispatcher
        self._state = state
        self._headers = dict(headers)
        self._environment = environment
        self._on_page = on_page

        # Fail before any request if the state cannot be expressed.
        build_sync_params(state, environment)

        self.status = SessionState.IDLE
        self.requests: List[Dict[str, Any]] = []
        self.pages_received = 0
        self.last_pagination_token: Optional[str] = None
        self.error: Optional[DeliveryError] = None
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def state(self) -> SyncState:
        """The state that the next (or last) request was built from."""
        return self._state

    def _build_descriptor(self) -> RequestDescriptor:
        params = build_sync_params(self._state, self._environment)
        self.requests.append(params)
        return RequestDescriptor(
            resource_path=SYNC_RESOURCE,
            headers=self._headers,
            query_params=params,
        )

    async def run(self) -> Outcome[SyncResult]:
        """Fetch pages until a sync token arrives or a request fails."""
        if self.status is not SessionState.IDLE:
            raise UsageError(
                f"Sync session already {self.status.value}; start a new session"
            )

        self.status = SessionState.AWAITING_PAGE
        items: List[Dict[str, Any]] = []

        while True:
            descriptor = self._build_descriptor()
            logger.debug(
                "Requesting sync page %d: %s",
                self.pages_received + 1,
                describe_sync_params(dict(descriptor.query_params)),
            )
            outcome = await self._dispatcher.send(descriptor, RequestKind.SYNC)
            if not outcome.ok:
                return self._fail(outcome.error)

            try:
                page = parse_sync_page(outcome.value)
            except DeliveryError as e:
                return self._fail(e)

            self.pages_received += 1
            items.extend(page.items)
            if self._on_page is not None:
                try:
                    await _call_page_handler(self._on_page, page)
                except Exception as e:
                    error = UsageError(
                        f"Page handler failed: {e}",
                        {"page": self.pages_received, "cause": type(e).__name__},
                    )
                    error.__cause__ = e
                    return self._fail(error)

            # A pagination token means unfinished work, even if a sync
            # token came with it.
            if page.has_more:
                self.last_pagination_token = page.pagination_token
                self._state = self._state.continue_with(page.pagination_token)
                continue

            self.status = SessionState.DONE
            logger.info(
                "Sync finished after %d page(s) with %d item(s)",
                self.pages_received,
                len(items),
            )
            return Outcome.success(
                SyncResult(
                    items=items,
                    sync_token=page.sync_token,
                    page_count=self.pages_received,
                    total=page.total,
                )
            )

    def _fail(self, error: DeliveryError) -> Outcome[SyncResult]:
        self.status = SessionState.FAILED
        self.error = error
        logger.warning(
            "Sync failed on page %d (%s): %s",
            self.pages_received + 1,
            error.kind.value,
            error.message,
        )
        return Outcome.failure(error)

    def start(self, handler: Optional[OutcomeHandler]) -> Optional["asyncio.Task[None]"]:
        """Run the session in the background and hand the outcome to `handler`.

        Returns immediately. Without a handler nothing is sent and None is
        returned, matching Dispatcher.dispatch. A session that already ran
        delivers its UsageError to the handler instead of raising.
        """
        if handler is None:
            logger.debug("Skipping sync: no completion handler")
            return None

        async def run_and_deliver() -> None:
            try:
                outcome = await self.run()
            except UsageError as e:
                outcome = Outcome.failure(e)
            await deliver_outcome(handler, outcome)

        self._task = asyncio.get_running_loop().create_task(run_and_deliver())
        return self._task


async def _call_page_handler(handler: PageHandler, page: SyncPage) -> None:
    result = handler(page)
    if inspect.isawaitable(result):
        await result
