"""
Tests for the Stack client.
"""

from datetime import datetime, timezone

import httpx
import pytest

from content_delivery.core.config import DeliverySettings
from content_delivery.sdk import PublishType, Stack, SyncState
from content_delivery.sdk.exceptions import ServerError, TransportError, UsageError
from tests.helpers.api import entry, sync_payload


class TestStackConfiguration:
    def test_requires_credentials(self):
        with pytest.raises(UsageError, match="API key"):
            Stack("", "token")
        with pytest.raises(UsageError, match="Delivery token"):
            Stack("key", "  ")

    async def test_default_endpoint(self):
        stack = Stack("key", "token")
        assert stack.endpoint == "https://cdn.contentstack.io/v3"
        await stack.close()

    async def test_region_endpoint(self):
        stack = Stack("key", "token", region="eu")
        assert stack.endpoint == "https://eu-cdn.contentstack.com/v3"
        await stack.close()

    async def test_headers(self, stack):
        assert stack.api_key == "blt_api_key"
        assert stack.delivery_token == "cs_delivery_token"
        assert stack.environment == "production"
        assert list(stack.headers)[-3:] == ["api_key", "access_token", "environment"]

    async def test_set_and_remove_header(self, stack):
        stack.set_header("branch", "develop")
        stack.set_header("", "ignored")
        stack.set_header("ignored", "")
        assert stack.headers["branch"] == "develop"
        assert "ignored" not in stack.headers

        stack.remove_header("environment")
        stack.remove_header("missing")
        assert stack.environment is None

    async def test_headers_property_is_a_copy(self, stack):
        stack.headers["api_key"] = "tampered"
        assert stack.api_key == "blt_api_key"

    async def test_from_settings(self, api):
        settings = DeliverySettings(
            api_key="key",
            delivery_token="token",
            environment="staging",
            host="cdn.example.com",
            region="azure_na",
        )
        stack = Stack.from_settings(settings, transport=api.transport)
        assert stack.endpoint == "https://azure-na-cdn.example.com/v3"
        assert stack.environment == "staging"
        await stack.close()


class TestStackSync:
    async def test_sync_scenario(self, api, stack):
        api.add_pages(
            sync_payload([entry("a")], pagination_token="tok1"),
            sync_payload([entry("b")], sync_token="final1"),
        )

        result = await stack.sync()

        assert result.sync_token == "final1"
        assert api.sync_params() == [
            {"init": "true", "environment": "production"},
            {"pagination_token": "tok1", "environment": "production"},
        ]
        request = api.sync_requests[0]
        assert request.headers["api_key"] == "blt_api_key"
        assert request.headers["access_token"] == "cs_delivery_token"

    async def test_sync_without_environment(self, api, stack_no_env):
        api.add_pages(sync_payload([], sync_token="final1"))

        await stack_no_env.sync()

        assert api.sync_params() == [{"init": "true"}]

    async def test_sync_from_date(self, api, stack_no_env):
        api.add_pages(sync_payload([], sync_token="final1"))

        await stack_no_env.sync_from_date(datetime(2018, 10, 7, tzinfo=timezone.utc))

        assert api.sync_params() == [
            {"init": "true", "start_from": "2018-10-07T00:00:00.000Z"}
        ]

    @pytest.mark.parametrize(
        "method,arg,expected",
        [
            ("sync_content_type", "blog", {"content_type_uid": "blog"}),
            ("sync_locale", "en-us", {"locale": "en-us"}),
            ("sync_publish_type", PublishType.ASSET_PUBLISHED, {"type": "asset_published"}),
            ("sync_publish_type", "entry_deleted", {"type": "entry_deleted"}),
        ],
    )
    async def test_single_filter_entry_points(self, api, stack_no_env, method, arg, expected):
        api.add_pages(sync_payload([], sync_token="final1"))

        await getattr(stack_no_env, method)(arg)

        assert api.sync_params() == [{"init": "true", **expected}]

    async def test_sync_with_combines_filters(self, api, stack):
        api.add_pages(sync_payload([], sync_token="final1"))

        await stack.sync_with(
            content_type="blog",
            from_date=datetime(2018, 10, 7, tzinfo=timezone.utc),
            locale="en-us",
            publish_type="entry_published",
        )

        assert api.sync_params() == [
            {
                "init": "true",
                "content_type_uid": "blog",
                "locale": "en-us",
                "start_from": "2018-10-07T00:00:00.000Z",
                "type": "entry_published",
                "environment": "production",
            }
        ]

    async def test_sync_with_token_and_locale_rejected_before_dispatch(self, api, stack):
        with pytest.raises(UsageError):
            await stack.sync_with(pagination_token="tok1", locale="en-us")

        assert api.requests == []

    async def test_sync_from_string_date_rejected(self, api, stack):
        with pytest.raises(UsageError):
            await stack.sync_from_date("2018-10-07")
        assert api.requests == []

    async def test_sync_token(self, api, stack_no_env):
        api.add_pages(sync_payload([entry("x")], sync_token="final2"), start="final1")

        result = await stack_no_env.sync_token("final1")

        assert result.sync_token == "final2"
        assert api.sync_params() == [{"sync_token": "final1"}]

    async def test_sync_pagination_token(self, api, stack_no_env):
        api.add_pages(
            sync_payload([entry("c")], pagination_token="tok2"),
            sync_payload([entry("d")], sync_token="final1"),
            start="tok1",
        )

        result = await stack_no_env.sync_pagination_token("tok1")

        assert [i["data"]["uid"] for i in result.items] == ["c", "d"]
        assert api.sync_params() == [
            {"pagination_token": "tok1"},
            {"pagination_token": "tok2"},
        ]

    async def test_sync_raises_classified_error(self, api, stack):
        api.on_sync("init", httpx.ReadTimeout("timed out"))

        with pytest.raises(TransportError):
            await stack.sync()

    async def test_expired_token_is_server_error(self, api, stack):
        with pytest.raises(ServerError) as exc_info:
            await stack.sync_token("unknown")
        assert exc_info.value.status_code == 422

    async def test_on_page_streaming(self, api, stack):
        api.add_pages(
            sync_payload([entry("a")], pagination_token="tok1"),
            sync_payload([entry("b")], sync_token="final1"),
        )
        pages = []

        await stack.sync(on_page=pages.append)

        assert len(pages) == 2

    async def test_start_sync_callback(self, api, stack):
        api.add_pages(sync_payload([entry("a")], sync_token="final1"))
        outcomes = []

        await stack.start_sync(SyncState.init(), outcomes.append)

        assert [o.value.sync_token for o in outcomes] == ["final1"]

    async def test_headers_changed_after_request_built(self, api, stack):
        api.add_pages(sync_payload([], sync_token="final1"))
        session = stack.sync_session(SyncState.init())
        stack.set_header("access_token", "rotated")

        await session.run()

        assert api.requests[0].headers["access_token"] == "cs_delivery_token"


class TestStackContentTypes:
    async def test_get_content_types(self, api, stack):
        api.content_types_reply = {"content_types": [{"uid": "blog"}], "count": 1}

        result = await stack.get_content_types({"include_global_field_schema": True})

        assert result.count == 1
        assert dict(api.requests[0].url.params) == {
            "include_global_field_schema": "true",
            "environment": "production",
            "include_count": "true",
        }

    async def test_get_content_types_without_environment(self, api, stack_no_env):
        await stack_no_env.get_content_types()

        assert dict(api.requests[0].url.params) == {}

    async def test_list_content_types_callback(self, api, stack):
        outcomes = []

        await stack.list_content_types({}, outcomes.append)

        assert len(outcomes) == 1
        assert outcomes[0].ok

    async def test_get_content_types_error(self, api, stack):
        api.content_types_reply = httpx.Response(
            412, json={"error_message": "Access token invalid", "error_code": 109}
        )

        with pytest.raises(ServerError, match="Access token invalid"):
            await stack.get_content_types()
