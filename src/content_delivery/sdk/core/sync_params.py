"""
Pure functions for building sync request parameters.

The sync endpoint accepts three mutually exclusive request shapes: a fresh
start (`init=true` plus optional filters), a pagination token continuation,
and a sync token continuation. Tokens already encode the filters of the
sync they belong to, so filters are never resent with them.
"""

from typing import Any, Dict, Optional

from ..exceptions import UsageError
from ..models import SyncMode, SyncState
from .utils import format_utc_iso

FILTER_KEYS = ("content_type_uid", "locale", "start_from", "type")


def build_init_params(state: SyncState) -> Dict[str, Any]:
    """Build parameters for a fresh sync with optional filters."""
    filters = state.filters
    params: Dict[str, Any] = {"init": True}
    if filters.content_type is not None:
        params["content_type_uid"] = filters.content_type
    if filters.locale is not None:
        params["locale"] = filters.locale
    if filters.from_date is not None:
        params["start_from"] = format_utc_iso(filters.from_date)
    if filters.publish_type is not None:
        params["type"] = filters.publish_type.value
    return params


def build_sync_params(
    state: SyncState, environment: Optional[str] = None
) -> Dict[str, Any]:
    """Build the exact query parameters for the request described by `state`.

    Raises:
        UsageError: If filters accompany a continuation token.
    """
    if state.mode is SyncMode.INIT:
        params = build_init_params(state)
    else:
        if not state.filters.is_empty():
            raise UsageError(
                f"Sync filters cannot be combined with a {state.mode.value}",
                {"filters": state.filters.supplied()},
            )
        if state.mode is SyncMode.PAGINATION_TOKEN:
            params = {"pagination_token": state.pagination_token}
        else:
            params = {"sync_token": state.sync_token}

    if environment:
        params["environment"] = environment
    return params


def describe_sync_params(params: Dict[str, Any]) -> str:
    """Render parameters for log output without exposing full tokens."""
    parts = []
    for key, value in params.items():
        if key in ("pagination_token", "sync_token") and isinstance(value, str):
            value = f"{value[:6]}..." if len(value) > 6 else value
        parts.append(f"{key}={value}")
    return " ".join(parts)
