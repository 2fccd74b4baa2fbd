"""
Tests for pure helper functions.
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from content_delivery.sdk.core.utils import (
    Region,
    build_auth_headers,
    build_endpoint,
    classify_request_exception,
    format_utc_iso,
    resolve_host,
)
from content_delivery.sdk.exceptions import UsageError


class TestFormatUtcIso:
    def test_aware_utc(self):
        value = datetime(2018, 10, 7, 12, 30, 45, 123456, tzinfo=timezone.utc)
        assert format_utc_iso(value) == "2018-10-07T12:30:45.123Z"

    def test_offset_converted(self):
        value = datetime(2018, 10, 7, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_utc_iso(value) == "2018-10-06T23:00:00.000Z"

    def test_naive_taken_as_utc(self):
        assert format_utc_iso(datetime(2018, 10, 7)) == "2018-10-07T00:00:00.000Z"

    def test_early_year_zero_padded(self):
        value = datetime(999, 1, 2, 3, 4, 5, 6000, tzinfo=timezone.utc)
        assert format_utc_iso(value) == "0999-01-02T03:04:05.006Z"


class TestHostResolution:
    def test_us_keeps_host(self):
        assert resolve_host("cdn.contentstack.io", Region.US) == "cdn.contentstack.io"

    @pytest.mark.parametrize(
        "region,expected",
        [
            (Region.EU, "eu-cdn.contentstack.com"),
            ("eu", "eu-cdn.contentstack.com"),
            (Region.AZURE_NA, "azure-na-cdn.contentstack.com"),
            ("azure-eu", "azure-eu-cdn.contentstack.com"),
        ],
    )
    def test_region_prefix_and_legacy_host(self, region, expected):
        assert resolve_host("cdn.contentstack.io", region) == expected

    def test_custom_host_only_prefixed(self):
        assert resolve_host("cdn.example.com", "eu") == "eu-cdn.example.com"

    def test_unknown_region(self):
        with pytest.raises(UsageError, match="Unknown region"):
            resolve_host("cdn.example.com", "mars")

    def test_build_endpoint(self):
        assert build_endpoint("cdn.contentstack.io") == "https://cdn.contentstack.io/v3"
        assert (
            build_endpoint("localhost:8080/", scheme="http", version="/v3/")
            == "http://localhost:8080/v3"
        )


class TestHeaders:
    def test_order_and_optional_keys(self):
        headers = build_auth_headers("key", "token", "prod", branch="main")
        assert list(headers) == [
            "User-Agent",
            "Accept",
            "api_key",
            "access_token",
            "environment",
            "branch",
        ]

    def test_no_environment(self):
        assert "environment" not in build_auth_headers("key", "token")


class TestClassifyRequestException:
    def test_timeout(self):
        assert classify_request_exception(httpx.ReadTimeout("slow")) == "timeout"

    def test_network(self):
        assert classify_request_exception(httpx.ConnectError("refused")) == "network"
        assert classify_request_exception(OSError("boom")) == "network"

    def test_unknown(self):
        assert classify_request_exception(RuntimeError("odd")) == "unknown"
