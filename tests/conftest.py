import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from pawfeed.schemas.notification import CurrentUser
from pawfeed.services.identity import InMemoryTokenStore, StaticIdentityProvider
from pawfeed.services.notification_store import NotificationStore
from pawfeed.services.notifications_api import NotificationsAPIClient
from pawfeed.services.storage import InMemoryKeyValueStore

from tests.fake_api import create_fake_notifications_api

SITTER = CurrentUser(id="21", token="sitter-token", user_type="pet_sitter")
OWNER = CurrentUser(id="5", token="owner-token", user_type="pet_owner")


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_api():
    return create_fake_notifications_api()


@pytest.fixture
def api_state(fake_api):
    return fake_api.state.fake


@pytest_asyncio.fixture
async def api_client(fake_api):
    """API client talking to the fake API in-process."""
    transport = ASGITransport(app=fake_api)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield NotificationsAPIClient(base_url="http://test", client=http)


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def identity():
    return StaticIdentityProvider(SITTER)


@pytest.fixture
def token_store():
    return InMemoryTokenStore()


@pytest_asyncio.fixture
async def store(storage, api_client, identity, token_store, clock):
    notification_store = NotificationStore(
        storage=storage,
        api_client=api_client,
        identity=identity,
        token_store=token_store,
        clock=clock,
    )
    yield notification_store
    await notification_store.close()
