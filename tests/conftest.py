import inspect
import os

# Settings are read while topichub.main is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import anyio  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from topichub.auth.passwords import hash_password  # noqa: E402
from topichub.core.deps import get_user_directory  # noqa: E402
from topichub.db.engine import build_engine, get_store  # noqa: E402
from topichub.db.store import EntityStore  # noqa: E402
from topichub.main import app  # noqa: E402
from topichub.subscription.index import SubscriptionIndex  # noqa: E402
from topichub.topic.catalog import TopicCatalog  # noqa: E402
from topichub.user.directory import UserDirectory  # noqa: E402
from topichub.user.schemas import UserProfile, UserRecord  # noqa: E402

START_MS = 1_700_000_000_000
TEST_PASSWORD = "correct horse battery"


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock()


@pytest.fixture(name="store")
def store_fixture():
    """Create an in-memory SQLite store for testing."""
    store = EntityStore(build_engine("sqlite://", poolclass=StaticPool))
    store.create_schema()
    yield store
    store.dispose()


@pytest.fixture(name="users")
def users_fixture(store: EntityStore, clock: FakeClock) -> UserDirectory:
    return UserDirectory(store, clock=clock)


@pytest.fixture(name="topics")
def topics_fixture(store: EntityStore) -> TopicCatalog:
    return TopicCatalog(store)


@pytest.fixture(name="subscriptions")
def subscriptions_fixture(store: EntityStore) -> SubscriptionIndex:
    return SubscriptionIndex(store)


@pytest.fixture(name="admin_password", scope="session")
def admin_password_fixture() -> str:
    return TEST_PASSWORD


@pytest.fixture(name="password_hash", scope="session")
def password_hash_fixture(admin_password: str) -> str:
    return hash_password(admin_password, rounds=4)


@pytest.fixture(name="test_user")
def test_user_fixture(users: UserDirectory) -> UserRecord:
    """Create a regular user."""
    return users.upsert_from_external_identity(
        1001, UserProfile(first_name="Test", last_name="User", username="test_user")
    )


@pytest.fixture(name="other_user")
def other_user_fixture(users: UserDirectory) -> UserRecord:
    return users.upsert_from_external_identity(
        1002, UserProfile(first_name="Other", last_name="User", username="other")
    )


@pytest.fixture(name="admin_user")
def admin_user_fixture(users: UserDirectory, password_hash: str) -> UserRecord:
    user = users.upsert_from_external_identity(
        2001, UserProfile(first_name="Ada", last_name="Admin", username="admin")
    )
    return users.promote_to_admin(user.id, password_hash)


@pytest.fixture(name="super_admin_user")
def super_admin_user_fixture(users: UserDirectory, password_hash: str) -> UserRecord:
    user = users.upsert_from_external_identity(
        3001, UserProfile(first_name="Sam", last_name="Super", username="root")
    )
    return users.promote_to_super_admin(user.id, password_hash)


@pytest.fixture(name="client_for")
def client_for_fixture(store: EntityStore, clock: FakeClock):
    """Build test clients that act as a given user (or anonymously)."""

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_user_directory] = lambda: UserDirectory(
        store, clock=clock
    )

    def _client_for(user: UserRecord | None = None) -> TestClient:
        headers = {"X-User-Id": str(user.id)} if user is not None else {}
        return TestClient(app, headers=headers)

    yield _client_for

    app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(client_for, test_user: UserRecord) -> TestClient:
    """Client authenticated as a regular user."""
    return client_for(test_user)


@pytest.fixture(name="admin_client")
def admin_client_fixture(client_for, admin_user: UserRecord) -> TestClient:
    return client_for(admin_user)


@pytest.fixture(name="super_admin_client")
def super_admin_client_fixture(client_for, super_admin_user: UserRecord) -> TestClient:
    return client_for(super_admin_user)


@pytest.fixture(name="unauthenticated_client")
def unauthenticated_client_fixture(client_for) -> TestClient:
    """Create a test client without identity (for testing auth failures)."""
    return client_for()
