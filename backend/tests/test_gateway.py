import pytest

from backend.auth_service.pg_user_store import PostgresUserStore
from backend.auth_service.user_store import JsonUserStore, MemoryUserStore
from backend.common.http import CORS_HEADERS
from backend.gateway.server import build_user_stores, create_app

ALL_ENDPOINTS = [
    "/api/auth/simple-login",
    "/api/auth/simple-register",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/me",
    "/api/auth/users",
    "/api/events/simple",
    "/api/test",
    "/api/debug",
]


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers.get(name) == value


@pytest.mark.parametrize("url", ALL_ENDPOINTS)
def test_options_preflight(client, url):
    response = client.options(url)

    assert response.status_code == 200
    assert response.get_data() == b""
    assert_cors(response)


@pytest.mark.parametrize("method, url, body", [
    ("post", "/api/auth/simple-login", {"userId": "volunteer@test.com", "password": "test123"}),
    ("post", "/api/auth/simple-login", {"userId": "volunteer@test.com", "password": "nope"}),
    ("post", "/api/auth/simple-register", {}),
    ("get", "/api/events/simple", None),
    ("delete", "/api/events/simple", None),
    ("get", "/api/test", None),
])
def test_cors_on_every_response(client, method, url, body):
    response = getattr(client, method)(url, json=body)
    assert_cors(response)


def test_cors_literal_wildcard_with_origin(client):
    response = client.get("/api/test", headers={"Origin": "http://localhost:5500"})
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Credentials"] == "true"


def test_unknown_path_is_json_404(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.get_json() == {"message": "Not found"}
    assert_cors(response)


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}
    assert client.get("/").get_json() == {"status": "gateway_ok"}


def test_build_user_stores_memory():
    simple, secure = build_user_stores("memory")

    assert isinstance(simple, MemoryUserStore)
    assert isinstance(secure, MemoryUserStore)
    assert len(simple.all()) == 2
    assert secure.all() == []


def test_build_user_stores_postgres():
    simple, secure = build_user_stores("postgres")

    assert isinstance(simple, PostgresUserStore)
    assert simple.table == "app_users"
    assert secure.table == "secure_users"


def test_build_user_stores_unknown():
    with pytest.raises(ValueError):
        build_user_stores("mongodb")


def test_create_app_from_environment(monkeypatch, tmp_path):
    users_file = tmp_path / "env-users.json"
    monkeypatch.setenv("USER_STORE_BACKEND", "json")
    monkeypatch.setenv("USERS_FILE", str(users_file))
    monkeypatch.setenv("SECURE_USERS_FILE", str(tmp_path / "env-secure.json"))

    app = create_app()

    store = app.extensions["user_store"]
    assert isinstance(store, JsonUserStore)
    assert store.path == str(users_file)
    assert app.extensions["secure_user_store"].all() == []

    response = app.test_client().post("/api/auth/simple-register", json={"userId": "env@test.com", "password": "pw"})
    assert response.status_code == 201
    assert users_file.exists()


@pytest.mark.parametrize("method, url", [
    ("get", "/api/events/simple"),
    ("post", "/api/auth/simple-login"),
    ("get", "/api/test"),
    ("options", "/api/auth/login"),
])
def test_cors_headers_set_once(client, method, url):
    response = getattr(client, method)(url)

    for name, value in CORS_HEADERS.items():
        assert response.headers.getlist(name) == [value]
