import pytest

from backend.auth_service.user_store import JsonUserStore, MemoryUserStore
from backend.events_service.store import MemoryEventStore
from backend.gateway.server import create_app

TEST_JWT_SECRET = "test_secret_for_volunteer_forest_tests"


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    # Ensure JWT_SECRET is set and nothing from a local .env leaks in
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    for name in ("APP_ENV", "DATABASE_URL", "VERCEL", "TOKEN_EXPIRATION_MINUTES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def users_file(tmp_path):
    return str(tmp_path / "users.json")


@pytest.fixture
def user_store(users_file):
    return JsonUserStore(users_file)


@pytest.fixture
def secure_user_store():
    return MemoryUserStore(defaults=[])


@pytest.fixture
def event_store():
    return MemoryEventStore()


@pytest.fixture
def app(user_store, secure_user_store, event_store):
    app = create_app(
        user_store=user_store,
        secure_user_store=secure_user_store,
        event_store=event_store,
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_db(mocker):
    """
    Mocks the database connection and cursor.
    """
    mock_conn = mocker.Mock()
    mock_cursor = mocker.Mock()

    # Setup the context manager for connection
    mock_conn.__enter__ = mocker.Mock(return_value=mock_conn)
    mock_conn.__exit__ = mocker.Mock(return_value=None)

    # Setup the context manager for cursor
    mock_cursor.__enter__ = mocker.Mock(return_value=mock_cursor)
    mock_cursor.__exit__ = mocker.Mock(return_value=None)

    # Connect cursor to connection
    mock_conn.cursor.return_value = mock_cursor

    # Mock get_db everywhere it is used
    mocker.patch("backend.auth_service.pg_user_store.get_db", return_value=mock_conn)
    mocker.patch("backend.diagnostics_service.routes.get_db", return_value=mock_conn)

    return mock_conn, mock_cursor
