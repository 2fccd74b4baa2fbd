"""
Custom exceptions for the content delivery SDK.
"""

from enum import Enum
from typing import Dict, Any, Optional


class ErrorKind(str, Enum):
    """Classification of a failed request."""

    TRANSPORT = "transport"
    SERVER = "server"
    PROTOCOL = "protocol"
    USAGE = "usage"


class DeliveryError(Exception):
    """Base exception for delivery API errors."""

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, status_code={self.status_code!r})"
        )


class TransportError(DeliveryError):
    """Raised when no response could be obtained (network, timeout, DNS)."""

    kind = ErrorKind.TRANSPORT


class ServerError(DeliveryError):
    """Raised when the API answered with a non-2xx status or an error body."""

    kind = ErrorKind.SERVER


class ProtocolError(DeliveryError):
    """Raised when a response is malformed or missing expected fields."""

    kind = ErrorKind.PROTOCOL


class UsageError(DeliveryError, ValueError):
    """Raised when the caller violates a contract before any request is sent."""

    kind = ErrorKind.USAGE

