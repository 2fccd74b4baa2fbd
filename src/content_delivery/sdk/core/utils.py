"""
Utility functions for remote SDK operations.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Union

from ..exceptions import UsageError

LEGACY_CDN_HOST = "cdn.contentstack.io"
DEFAULT_CDN_HOST = "cdn.contentstack.com"


class Region(str, Enum):
    """Hosting regions of the delivery API."""

    US = "us"
    EU = "eu"
    AZURE_NA = "azure_na"
    AZURE_EU = "azure_eu"


def build_auth_headers(
    api_key: str,
    delivery_token: str,
    environment: Optional[str] = None,
    branch: Optional[str] = None,
) -> Dict[str, str]:
    """Build the ordered default header set for a stack."""
    headers = {
        "User-Agent": "content-delivery-sdk/1.0",
        "Accept": "application/json",
        "api_key": api_key,
        "access_token": delivery_token,
    }
    if environment:
        headers["environment"] = environment
    if branch:
        headers["branch"] = branch
    return headers


def format_utc_iso(value: datetime) -> str:
    """Format a datetime as yyyy-MM-ddTHH:mm:ss.SSSZ in UTC.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    # %Y is not zero-padded below year 1000 on every platform.
    return (
        f"{value.year:04d}-{value:%m-%dT%H:%M:%S}."
        f"{value.microsecond // 1000:03d}Z"
    )


def coerce_region(region: Union[Region, str]) -> Region:
    if isinstance(region, Region):
        return region
    try:
        return Region(str(region).strip().lower().replace("-", "_"))
    except ValueError:
        raise UsageError(f"Unknown region: {region!r}", {"region": region}) from None


def resolve_host(host: str, region: Union[Region, str] = Region.US) -> str:
    """Prefix the host for non-US regions."""
    region = coerce_region(region)
    if region is Region.US:
        return host

    if host.lower() == LEGACY_CDN_HOST:
        host = DEFAULT_CDN_HOST
    prefix = region.value.replace("_", "-")
    return f"{prefix}-{host}"


def build_endpoint(
    host: str,
    region: Union[Region, str] = Region.US,
    scheme: str = "https://",
    version: str = "v3",
) -> str:
    """Build the API base URL, e.g. https://cdn.contentstack.io/v3."""
    if not scheme.endswith("://"):
        scheme = f"{scheme.rstrip(':/')}://"
    resolved = resolve_host(host.strip().rstrip("/"), region)
    return f"{scheme}{resolved}/{version.strip('/')}"


def classify_request_exception(exception: Exception) -> str:
    """Classify exception type for error handling logic."""
    import httpx

    error_msg = str(exception).lower()

    if isinstance(exception, httpx.TimeoutException):
        return "timeout"
    elif isinstance(
        exception, (httpx.NetworkError, httpx.ConnectError, ConnectionError, OSError)
    ):
        return "network"
    elif any(
        term in error_msg
        for term in ["connection", "network", "refused", "unreachable", "name resolution"]
    ):
        return "network"
    else:
        return "unknown"
