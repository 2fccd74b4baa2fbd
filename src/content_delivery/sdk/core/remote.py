"""
Pure functions for remote API operations.

Functions for decoding responses, classifying failures, and turning
payloads into SDK models without I/O dependencies.
"""

import json
from typing import Any, Dict, Optional, Tuple

from ..exceptions import (
    ProtocolError,
    ServerError,
    TransportError,
)
from ..models import ContentTypesResult, SyncPage
from .utils import classify_request_exception


def decode_json_body(body: bytes) -> Dict[str, Any]:
    """Decode a response body that must be a JSON object."""
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise ProtocolError(f"Response body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ProtocolError(
            "Invalid response format: expected JSON object",
            {"type": type(data).__name__},
        )
    return data


def is_error_payload(response_data: Dict[str, Any]) -> bool:
    """Whether a 2xx body actually describes an API error."""
    return "error_message" in response_data or "error_code" in response_data


def extract_error_details(response_data: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Extract error message and details from an API error body."""
    message = response_data.get("error_message") or "Unknown error"
    details: Dict[str, Any] = {}
    if "error_code" in response_data:
        details["error_code"] = response_data["error_code"]
    if response_data.get("errors"):
        details["errors"] = response_data["errors"]
    return str(message), details


def parse_http_error_response(
    status_code: int, body: bytes, reason: str = ""
) -> ServerError:
    """Build a ServerError from a non-2xx response."""
    try:
        response_data = json.loads(body.decode("utf-8")) if body else {}
    except (UnicodeDecodeError, ValueError):
        response_data = {}

    if isinstance(response_data, dict) and is_error_payload(response_data):
        message, details = extract_error_details(response_data)
    else:
        message = reason or body.decode("utf-8", errors="replace")[:200] or "error"
        details = {}
    return ServerError(f"HTTP {status_code}: {message}", details, status_code)


def map_request_exception(exception: Exception) -> TransportError:
    """Map an exception raised before any response arrived."""
    error_type = classify_request_exception(exception)
    if error_type == "timeout":
        message = f"Request timed out: {exception}"
    elif error_type == "network":
        message = f"Network error: {exception}"
    else:
        message = f"Request failed: {exception}"
    return TransportError(
        message, {"error_type": error_type, "exception": type(exception).__name__}
    )


def _int_field(response_data: Dict[str, Any], *names: str) -> int:
    for name in names:
        value = response_data.get(name)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ProtocolError(
                f"Response field '{name}' is not a number", {name: value}
            ) from None
    return 0


def _token_field(response_data: Dict[str, Any], name: str) -> Optional[str]:
    value = response_data.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ProtocolError(f"Sync response field '{name}' is not a string")
    return value


def parse_sync_page(response_data: Dict[str, Any]) -> SyncPage:
    """Parse a sync endpoint payload into a SyncPage.

    Raises:
        ProtocolError: If items are missing or neither token is present.
    """
    items = response_data.get("items")
    if not isinstance(items, list):
        raise ProtocolError("Invalid sync response: missing 'items' list")

    pagination_token = _token_field(response_data, "pagination_token")
    sync_token = _token_field(response_data, "sync_token")
    if pagination_token is None and sync_token is None:
        raise ProtocolError(
            "Invalid sync response: neither 'pagination_token' nor 'sync_token' present"
        )

    return SyncPage(
        items=items,
        skip=_int_field(response_data, "skip"),
        limit=_int_field(response_data, "limit"),
        total=_int_field(response_data, "total_count", "total"),
        pagination_token=pagination_token,
        sync_token=sync_token,
    )


def parse_content_types_response(response_data: Dict[str, Any]) -> ContentTypesResult:
    """Parse a content type listing payload."""
    content_types = response_data.get("content_types")
    if not isinstance(content_types, list):
        raise ProtocolError("Invalid response: missing 'content_types' list")

    count = _int_field(response_data, "count") if "count" in response_data else None
    return ContentTypesResult(
        content_types=content_types,
        count=count,
        raw=response_data,
    )


def build_content_type_params(
    params: Optional[Dict[str, Any]], environment: Optional[str] = None
) -> Dict[str, Any]:
    """Copy caller parameters and add environment scoping when configured."""
    query = dict(params or {})
    if environment:
        query["environment"] = environment
        query["include_count"] = True
    return query

