import pytest
from backend.auth_service.utils import (
    create_token,
    hash_password,
    verify_password,
    verify_token_from_request,
)
import jwt

SECRET = "utils_test_secret_long_enough_for_hs256"


@pytest.fixture(autouse=True)
def jwt_secret(test_env, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)


def test_create_token():
    user_id = "123"
    role = "admin"
    token = create_token(user_id, role)

    assert isinstance(token, str)

    # Decode to verify contents using the same secret
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["sub"] == user_id
    assert payload["role"] == role
    assert "exp" in payload
    assert "iat" in payload


def test_create_token_stringifies_id():
    payload = jwt.decode(create_token(42, "volunteer"), SECRET, algorithms=["HS256"])
    assert payload["sub"] == "42"


def test_create_token_without_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET")
    with pytest.raises(RuntimeError, match="JWT_SECRET missing"):
        create_token("1", "volunteer")


def test_token_expiration_from_env(monkeypatch):
    monkeypatch.setenv("TOKEN_EXPIRATION_MINUTES", "5")
    payload = jwt.decode(create_token("1", "volunteer"), SECRET, algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 5 * 60


def test_hash_and_verify_password():
    password_hash = hash_password("correct horse")

    assert password_hash != "correct horse"
    assert verify_password(password_hash, "correct horse")
    assert not verify_password(password_hash, "wrong horse")


def test_verify_password_rejects_plaintext_record():
    # A plaintext value in the hash column is not a valid Argon2 hash
    assert not verify_password("admin123", "admin123")


def test_verify_token_from_request_valid(app):
    user_id = "789"
    role = "organizer"
    token = create_token(user_id, role)

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        uid, r, err, code = verify_token_from_request()
        assert uid == user_id
        assert r == role
        assert err is None
        assert code is None


def test_verify_token_from_request_missing_header(app):
    with app.test_request_context():
        uid, r, err, code = verify_token_from_request()
        assert uid is None
        assert code == 401
        assert err.json["message"] == "missing token"


def test_verify_token_from_request_invalid_format(app):
    with app.test_request_context(headers={"Authorization": "InvalidFormat"}):
        uid, r, err, code = verify_token_from_request()
        assert uid is None
        assert code == 401
        assert err.json["message"] == "missing token"  # Logic says if not startswith Bearer


def test_verify_token_from_request_expired(app, mocker):
    mocker.patch("backend.auth_service.utils.get_token_expiration_minutes", return_value=-1)
    token = create_token("1", "volunteer")

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        uid, r, err, code = verify_token_from_request()
        assert uid is None
        assert code == 401
        assert err.json["message"] == "token expired"


def test_verify_token_from_request_wrong_secret(app):
    token = jwt.encode({"sub": "1", "role": "admin"}, "some_other_secret_of_decent_length", algorithm="HS256")

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        uid, r, err, code = verify_token_from_request()
        assert uid is None
        assert code == 401
        assert err.json["message"] == "invalid token"


def test_verify_token_from_request_wrong_role(app):
    user_id = "111"
    role = "volunteer"
    token = create_token(user_id, role)

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        uid, r, err, code = verify_token_from_request(required_roles=["admin"])
        assert uid is None
        assert code == 403
        assert err.json["message"] == "permission denied"
