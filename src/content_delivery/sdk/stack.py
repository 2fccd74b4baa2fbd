"""
Stack client: the entry point for reading published content.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

import httpx

from .config import SDKConfig, get_logger
from .content_types import ContentTypeLister
from .core.utils import Region, build_auth_headers, build_endpoint
from .dispatcher import Dispatcher, OutcomeHandler
from .exceptions import UsageError
from .models import ContentTypesResult, PublishType, SyncResult, SyncState
from .sync import SyncStackMixin
from .sync_session import PageHandler, SyncSession


class Stack(SyncStackMixin):
    """
    Client for one stack of the content delivery API.

    A stack holds the content types, entries and assets of a site. The
    client keeps an ordered header set (credentials, environment) that is
    copied into every request it builds.

    Examples:
        Full sync, then incremental syncs:
        >>> async with Stack("api_key", "delivery_token", "production") as stack:
        ...     result = await stack.sync()
        ...     save(result.items)
        ...     token = result.sync_token
        ...     later = await stack.sync_token(token)

        Streaming pages as they arrive:
        >>> await stack.sync(on_page=lambda page: store(page.items))

        Blocking use:
        >>> stack = Stack("api_key", "delivery_token")
        >>> result = stack.sync_blocking()

    Headers must not be changed while a request is in flight; each request
    takes a snapshot of the headers when it is built.
    """

    def __init__(
        self,
        api_key: str,
        delivery_token: str,
        environment: Optional[str] = None,
        *,
        host: str = "cdn.contentstack.io",
        region: Union[Region, str] = Region.US,
        scheme: str = "https://",
        version: str = "v3",
        branch: Optional[str] = None,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        debug: bool = False,
        log_level: str = "INFO",
    ):
        """
        Initialize the stack client.

        Args:
            api_key: API key of the stack
            delivery_token: Delivery token scoped to the environment
            environment: Environment whose published content is read
            host: API host name, before region resolution
            region: Hosting region; non-US regions prefix the host
            scheme: URL scheme
            version: API version path segment
            branch: Optional branch header
            timeout: HTTP request timeout in seconds
            transport: Custom httpx transport, mainly for testing
            debug: Enable debug logging
            log_level: Log level of the content_delivery.sdk logger

        Raises:
            UsageError: If the API key or delivery token is empty
        """
        if not api_key or not api_key.strip():
            raise UsageError("API key cannot be empty")
        if not delivery_token or not delivery_token.strip():
            raise UsageError("Delivery token cannot be empty")

        self.config = SDKConfig(debug=debug, log_level=log_level)
        self.config.setup_logging()
        self.logger = get_logger("stack")

        self.endpoint = build_endpoint(host, region, scheme, version)
        self._headers = build_auth_headers(
            api_key.strip(), delivery_token.strip(), environment, branch
        )
        self._dispatcher = Dispatcher(self.endpoint, timeout=timeout, transport=transport)

        self.logger.debug("Stack initialized for %s", self.endpoint)

    @classmethod
    def from_settings(cls, settings=None, **kwargs: Any) -> "Stack":
        """Create a stack from CONTENT_DELIVERY_* settings."""
        from ..core.config import get_settings

        settings = settings or get_settings()
        options: Dict[str, Any] = {
            "host": settings.host,
            "region": settings.region,
            "scheme": settings.scheme,
            "version": settings.version,
            "branch": settings.branch,
            "timeout": settings.timeout_seconds,
            "debug": settings.debug,
            "log_level": settings.log_level,
        }
        options.update(kwargs)
        return cls(
            settings.api_key,
            settings.delivery_token,
            settings.environment,
            **options,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self._dispatcher.close()

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def headers(self) -> Dict[str, str]:
        """Copy of the current header set, in insertion order."""
        return dict(self._headers)

    @property
    def api_key(self) -> str:
        return self._headers.get("api_key", "")

    @property
    def delivery_token(self) -> str:
        return self._headers.get("access_token", "")

    @property
    def environment(self) -> Optional[str]:
        return self._headers.get("environment") or None

    def set_header(self, key: str, value: str) -> None:
        """Add or replace a header. Empty keys or values are ignored."""
        if key and value:
            self._headers[key] = value

    def remove_header(self, key: str) -> None:
        self._headers.pop(key, None)

    # Sync

    def sync_session(
        self, state: SyncState, on_page: Optional[PageHandler] = None
    ) -> SyncSession:
        """Create an unstarted session for `state` using the current headers."""
        return SyncSession(
            self._dispatcher,
            state,
            self._headers,
            environment=self.environment,
            on_page=on_page,
        )

    def start_sync(
        self,
        state: SyncState,
        handler: Optional[OutcomeHandler],
        on_page: Optional[PageHandler] = None,
    ):
        """Start a sync in the background and deliver its outcome to `handler`."""
        return self.sync_session(state, on_page).start(handler)

    async def _run_sync(
        self, state: SyncState, on_page: Optional[PageHandler]
    ) -> SyncResult:
        outcome = await self.sync_session(state, on_page).run()
        return outcome.unwrap()

    async def sync(self, on_page: Optional[PageHandler] = None) -> SyncResult:
        """
        Perform a complete sync of all published content.

        Pages are followed automatically. Store the returned sync token;
        it fetches only the changes made after this sync.
        """
        return await self._run_sync(SyncState.init(), on_page)

    async def sync_pagination_token(
        self, pagination_token: str, on_page: Optional[PageHandler] = None
    ) -> SyncResult:
        """
        Resume an interrupted sync from a pagination token.

        Use the last token seen before the interruption; the filters of the
        original sync are implied by the token.
        """
        return await self._run_sync(
            SyncState.from_pagination_token(pagination_token), on_page
        )

    async def sync_token(
        self, sync_token: str, on_page: Optional[PageHandler] = None
    ) -> SyncResult:
        """Fetch changes made since the sync that produced `sync_token`."""
        return await self._run_sync(SyncState.from_sync_token(sync_token), on_page)

    async def sync_from_date(
        self, from_date: datetime, on_page: Optional[PageHandler] = None
    ) -> SyncResult:
        """Initial sync of content published on or after `from_date`."""
        return await self._run_sync(SyncState.init(from_date=from_date), on_page)

    async def sync_content_type(
        self, content_type: str, on_page: Optional[PageHandler] = None
    ) -> SyncResult:
        """Initial sync limited to entries of one content type."""
        return await self._run_sync(SyncState.init(content_type=content_type), on_page)

    async def sync_locale(
        self, locale: str, on_page: Optional[PageHandler] = None
    ) -> SyncResult:
        """Initial sync limited to one locale, e.g. "en-us"."""
        return await self._run_sync(SyncState.init(locale=locale), on_page)

    async def sync_publish_type(
        self,
        publish_type: Union[PublishType, str],
        on_page: Optional[PageHandler] = None,
    ) -> SyncResult:
        """Initial sync limited to one kind of publish event."""
        return await self._run_sync(SyncState.init(publish_type=publish_type), on_page)

    async def sync_with(
        self,
        content_type: Optional[str] = None,
        from_date: Optional[datetime] = None,
        locale: Optional[str] = None,
        publish_type: Optional[Union[PublishType, str]] = None,
        pagination_token: Optional[str] = None,
        sync_token: Optional[str] = None,
        on_page: Optional[PageHandler] = None,
    ) -> SyncResult:
        """
        Sync with any combination of filters.

        Filters combine with logical AND. A pagination or sync token cannot
        be combined with filters or with each other.

        Raises:
            UsageError: Before any request, for an invalid combination
        """
        state = SyncState.create(
            content_type=content_type,
            locale=locale,
            from_date=from_date,
            publish_type=publish_type,
            pagination_token=pagination_token,
            sync_token=sync_token,
        )
        return await self._run_sync(state, on_page)

    # Content types

    def content_type_lister(self) -> ContentTypeLister:
        return ContentTypeLister(
            self._dispatcher, self._headers, environment=self.environment
        )

    async def get_content_types(
        self, params: Optional[Dict[str, Any]] = None
    ) -> ContentTypesResult:
        """
        Fetch all content types of the stack.

        Args:
            params: Extra query parameters, e.g. {"include_global_field_schema": True}
        """
        outcome = await self.content_type_lister().fetch(params)
        return outcome.unwrap()

    def list_content_types(
        self, params: Optional[Dict[str, Any]], handler: Optional[OutcomeHandler]
    ):
        """Callback form of get_content_types; returns the scheduled task."""
        return self.content_type_lister().list(params, handler)
