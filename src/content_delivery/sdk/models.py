"""
Data models for requests, sync state and API results.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from .exceptions import DeliveryError, UsageError

T = TypeVar("T")


class RequestKind(str, Enum):
    """Which API operation a request belongs to."""

    SYNC = "sync"
    CONTENT_TYPES = "content_types"


class PublishType(str, Enum):
    """Publish event types accepted by the sync endpoint's `type` filter."""

    ASSET_DELETED = "asset_deleted"
    ASSET_PUBLISHED = "asset_published"
    ASSET_UNPUBLISHED = "asset_unpublished"
    CONTENT_TYPE_DELETED = "content_type_deleted"
    ENTRY_DELETED = "entry_deleted"
    ENTRY_PUBLISHED = "entry_published"
    ENTRY_UNPUBLISHED = "entry_unpublished"

    @classmethod
    def coerce(cls, value: Union["PublishType", str]) -> "PublishType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise UsageError(
                f"Unknown publish type {value!r}; expected one of: {allowed}",
                {"publish_type": value},
            ) from None


class SyncMode(str, Enum):
    """How a sync request starts: fresh, or continuing from a token."""

    INIT = "init"
    PAGINATION_TOKEN = "pagination_token"
    SYNC_TOKEN = "sync_token"


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable description of a single API call.

    Headers keep their insertion order. Both mappings are read-only
    snapshots, so later changes to the caller's dicts never leak into a
    request that was already described.

    Attributes:
        resource_path: Path relative to the API endpoint, e.g. "stacks/sync"
        headers: Ordered request headers
        query_params: Query string parameters
    """

    resource_path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.resource_path or not self.resource_path.strip():
            raise UsageError("Request resource path cannot be empty")
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(
            self, "query_params", MappingProxyType(dict(self.query_params))
        )


@dataclass(frozen=True)
class SyncFilters:
    """
    Filters narrowing an initial sync.

    Filters combine with logical AND and are only valid when a sync starts
    fresh; continuation requests carry their filters inside the token.
    """

    content_type: Optional[str] = None
    locale: Optional[str] = None
    from_date: Optional[datetime] = None
    publish_type: Optional[PublishType] = None

    def __post_init__(self) -> None:
        if self.from_date is not None:
            object.__setattr__(self, "from_date", _as_datetime(self.from_date))
        if self.publish_type is not None:
            object.__setattr__(
                self, "publish_type", PublishType.coerce(self.publish_type)
            )
        for name in ("content_type", "locale"):
            value = getattr(self, name)
            if value is not None and not str(value).strip():
                raise UsageError(f"Sync filter '{name}' cannot be empty")

    def is_empty(self) -> bool:
        return (
            self.content_type is None
            and self.locale is None
            and self.from_date is None
            and self.publish_type is None
        )

    def supplied(self) -> List[str]:
        """Names of the filters that were set."""
        return [
            name
            for name in ("content_type", "locale", "from_date", "publish_type")
            if getattr(self, name) is not None
        ]


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise UsageError(
        "Sync start date must be a datetime, not a pre-formatted value",
        {"from_date": repr(value)},
    )


@dataclass(frozen=True)
class SyncState:
    """
    Immutable state of one sync request.

    Exactly one of the following holds: the mode is INIT and no token is
    set, a pagination token is set, or a sync token is set. Filters are only
    allowed in INIT mode.
    """

    mode: SyncMode = SyncMode.INIT
    filters: SyncFilters = field(default_factory=SyncFilters)
    pagination_token: Optional[str] = None
    sync_token: Optional[str] = None

    def __post_init__(self) -> None:
        if self.mode is SyncMode.INIT:
            if self.pagination_token is not None or self.sync_token is not None:
                raise UsageError("An initial sync cannot carry a token")
            return

        token_name = self.mode.value
        token = getattr(self, token_name)
        other = (
            self.sync_token
            if self.mode is SyncMode.PAGINATION_TOKEN
            else self.pagination_token
        )
        if not token or not str(token).strip():
            raise UsageError(f"A {token_name} is required for this sync mode")
        if other is not None:
            raise UsageError(
                "pagination_token and sync_token cannot be combined in one request"
            )
        if not self.filters.is_empty():
            raise UsageError(
                f"Sync filters cannot be combined with a {token_name}",
                {"filters": self.filters.supplied()},
            )

    @classmethod
    def init(
        cls,
        content_type: Optional[str] = None,
        locale: Optional[str] = None,
        from_date: Optional[datetime] = None,
        publish_type: Optional[Union[PublishType, str]] = None,
    ) -> "SyncState":
        filters = SyncFilters(
            content_type=content_type,
            locale=locale,
            from_date=from_date,
            publish_type=publish_type,
        )
        return cls(mode=SyncMode.INIT, filters=filters)

    @classmethod
    def from_pagination_token(cls, pagination_token: str) -> "SyncState":
        return cls(mode=SyncMode.PAGINATION_TOKEN, pagination_token=pagination_token)

    @classmethod
    def from_sync_token(cls, sync_token: str) -> "SyncState":
        return cls(mode=SyncMode.SYNC_TOKEN, sync_token=sync_token)

    @classmethod
    def create(
        cls,
        content_type: Optional[str] = None,
        locale: Optional[str] = None,
        from_date: Optional[datetime] = None,
        publish_type: Optional[Union[PublishType, str]] = None,
        pagination_token: Optional[str] = None,
        sync_token: Optional[str] = None,
    ) -> "SyncState":
        """Build a state from any combination of arguments, rejecting bad mixes."""
        filters = SyncFilters(
            content_type=content_type,
            locale=locale,
            from_date=from_date,
            publish_type=publish_type,
        )
        if pagination_token is not None:
            mode = SyncMode.PAGINATION_TOKEN
        elif sync_token is not None:
            mode = SyncMode.SYNC_TOKEN
        else:
            mode = SyncMode.INIT
        return cls(
            mode=mode,
            filters=filters,
            pagination_token=pagination_token,
            sync_token=sync_token,
        )

    def continue_with(self, pagination_token: str) -> "SyncState":
        """State for the next page; filters are implied by the token."""
        return SyncState.from_pagination_token(pagination_token)


@dataclass
class SyncPage:
    """
    One page returned by the sync endpoint.

    Attributes:
        items: Change records in server order
        skip: Offset of this page
        limit: Page size used by the server
        total: Total number of records in the sync cycle
        pagination_token: Set while more pages are pending
        sync_token: Set on the last page; persist it for the next sync
    """

    items: List[Dict[str, Any]]
    skip: int = 0
    limit: int = 0
    total: int = 0
    pagination_token: Optional[str] = None
    sync_token: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.pagination_token)


@dataclass
class SyncResult:
    """
    Result of a completed sync.

    Contains every item received across all pages, in page order, and the
    sync token to store for the next incremental sync.

    Example:
        >>> result = await stack.sync()
        >>> for item in result.items:
        ...     print(item["type"], item["data"]["uid"])
        >>> save_token(result.sync_token)
    """

    items: List[Dict[str, Any]]
    sync_token: str
    page_count: int = 1
    total: int = 0


@dataclass
class ContentTypesResult:
    """Content types returned by the listing endpoint."""

    content_types: List[Dict[str, Any]]
    count: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a successful value or a classified error, never both.

    Example:
        >>> outcome = await dispatcher.send(descriptor, RequestKind.SYNC)
        >>> if outcome.ok:
        ...     payload = outcome.value
        ... else:
        ...     print(outcome.error.kind, outcome.error.message)
    """

    value: Optional[T] = None
    error: Optional[DeliveryError] = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("Outcome needs exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DeliveryError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the classified error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
