"""
Content Delivery SDK

Python client for reading published content and keeping a local copy in
sync with the delivery API.
"""

from .stack import Stack
from .dispatcher import Dispatcher
from .sync_session import SyncSession, SessionState
from .content_types import ContentTypeLister
from .core.utils import Region
from .models import (
    ContentTypesResult,
    Outcome,
    PublishType,
    RequestDescriptor,
    RequestKind,
    SyncFilters,
    SyncMode,
    SyncPage,
    SyncResult,
    SyncState,
)
from .exceptions import (
    DeliveryError,
    ErrorKind,
    ProtocolError,
    ServerError,
    TransportError,
    UsageError,
)

__version__ = "1.0.0"

__all__ = [
    "Stack",
    "Dispatcher",
    "SyncSession",
    "SessionState",
    "ContentTypeLister",
    "Region",
    "ContentTypesResult",
    "Outcome",
    "PublishType",
    "RequestDescriptor",
    "RequestKind",
    "SyncFilters",
    "SyncMode",
    "SyncPage",
    "SyncResult",
    "SyncState",
    "DeliveryError",
    "ErrorKind",
    "ProtocolError",
    "ServerError",
    "TransportError",
    "UsageError",
]
