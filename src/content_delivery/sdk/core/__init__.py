"""
Core pure functions for the SDK.

This package contains I/O-free functions for building sync parameters,
decoding responses, and the blocking-call helpers.
"""

from .sync_params import (
    FILTER_KEYS,
    build_init_params,
    build_sync_params,
    describe_sync_params,
)

from .remote import (
    build_content_type_params,
    decode_json_body,
    extract_error_details,
    is_error_payload,
    map_request_exception,
    parse_content_types_response,
    parse_http_error_response,
    parse_sync_page,
)

from .utils import (
    Region,
    build_auth_headers,
    build_endpoint,
    classify_request_exception,
    format_utc_iso,
    resolve_host,
)

from .sync import (
    create_thread_local_loop,
    detect_event_loop_state,
    run_in_thread_pool,
)

__all__ = [
    "FILTER_KEYS",
    "build_init_params",
    "build_sync_params",
    "describe_sync_params",
    "build_content_type_params",
    "decode_json_body",
    "extract_error_details",
    "is_error_payload",
    "map_request_exception",
    "parse_content_types_response",
    "parse_http_error_response",
    "parse_sync_page",
    "Region",
    "build_auth_headers",
    "build_endpoint",
    "classify_request_exception",
    "format_utc_iso",
    "resolve_host",
    "create_thread_local_loop",
    "detect_event_loop_state",
    "run_in_thread_pool",
]
