import pytest

from content_delivery.sdk import Dispatcher, Stack
from tests.helpers.api import FakeDeliveryAPI

ENDPOINT = "https://cdn.example.com/v3"


@pytest.fixture
def api():
    return FakeDeliveryAPI()


@pytest.fixture
async def dispatcher(api):
    dispatcher = Dispatcher(ENDPOINT, timeout=5, transport=api.transport)
    yield dispatcher
    await dispatcher.close()


@pytest.fixture
async def stack(api):
    stack = Stack(
        "blt_api_key",
        "cs_delivery_token",
        "production",
        host="cdn.example.com",
        transport=api.transport,
    )
    yield stack
    await stack.close()


@pytest.fixture
async def stack_no_env(api):
    stack = Stack(
        "blt_api_key",
        "cs_delivery_token",
        host="cdn.example.com",
        transport=api.transport,
    )
    yield stack
    await stack.close()
