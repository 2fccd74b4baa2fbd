"""
content-delivery

Client for a hosted content delivery API, with paginated incremental sync.
"""

from .sdk import (
    ContentTypeLister,
    ContentTypesResult,
    DeliveryError,
    Dispatcher,
    ErrorKind,
    Outcome,
    ProtocolError,
    PublishType,
    Region,
    ServerError,
    Stack,
    SyncResult,
    SyncSession,
    SyncState,
    TransportError,
    UsageError,
    __version__,
)

__all__ = [
    "ContentTypeLister",
    "ContentTypesResult",
    "DeliveryError",
    "Dispatcher",
    "ErrorKind",
    "Outcome",
    "ProtocolError",
    "PublishType",
    "Region",
    "ServerError",
    "Stack",
    "SyncResult",
    "SyncSession",
    "SyncState",
    "TransportError",
    "UsageError",
]
