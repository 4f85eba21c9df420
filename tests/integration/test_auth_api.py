import pytest

from berryevents import config
from berryevents.rate_limiter import reset_rate_limits
from berryevents.security_utils import create_refresh_token

from ..helpers import PASSWORD, bearer, expired_bearer

REGISTRATION = {
    "email": "Jane.Doe@Example.com",
    "username": "janedoe",
    "password": "s3cure-passw0rd",
    "firstName": "Jane",
    "lastName": "Doe",
    "phone": "+27 82 555 0100",
}


def test_register_returns_user_and_token(client):
    resp = client.post("/api/auth/register", json=REGISTRATION)

    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "jane.doe@example.com"
    assert body["user"]["firstName"] == "Jane"
    assert "hashed_password" not in body["user"]

    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == body["user"]["id"]


def test_duplicate_registration_conflicts(client):
    client.post("/api/auth/register", json=REGISTRATION)

    resp = client.post("/api/auth/register", json={**REGISTRATION, "username": "someone-else"})

    assert resp.status_code == 409


def test_short_password_is_rejected(client):
    resp = client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})
    assert resp.status_code == 422


def test_login(client, user):
    resp = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})

    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user.id
    assert resp.json()["token"]


def test_login_with_wrong_password(client, user):
    resp = client.post("/api/auth/login", json={"email": user.email, "password": "nope-nope"})
    assert resp.status_code == 401


def test_current_user_requires_token(client):
    resp = client.get("/api/auth/user")

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_expired_token(client, user):
    resp = client.get("/api/auth/user", headers=expired_bearer(user.id))

    assert resp.status_code == 401
    assert resp.headers["x-token-expired"] == "true"


@pytest.fixture()
def rate_limiting(monkeypatch):
    monkeypatch.setattr(config, "RATE_LIMIT_ENABLED", True)
    reset_rate_limits()
    yield
    reset_rate_limits()


def test_login_is_rate_limited(client, user, rate_limiting):
    body = {"email": user.email, "password": "wrong-password"}
    for _ in range(10):
        assert client.post("/api/auth/login", json=body).status_code == 401

    resp = client.post("/api/auth/login", json=body)

    assert resp.status_code == 429
    assert int(resp.headers["retry-after"]) > 0


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_registration_issues_refresh_token(client):
    body = client.post("/api/auth/register", json=REGISTRATION).json()

    resp = client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]})

    assert resp.status_code == 200
    access = resp.json()["accessToken"]
    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {access}"})
    assert me.status_code == 200
    assert me.json()["id"] == body["user"]["id"]


def test_login_issues_refresh_token_only_with_remember_me(client, user):
    plain = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    remembered = client.post(
        "/api/auth/login", json={"email": user.email, "password": PASSWORD, "rememberMe": True}
    )

    assert plain.json()["refreshToken"] is None
    assert remembered.json()["refreshToken"]


def test_refresh_token_is_not_a_bearer_credential(client, user):
    headers = {"Authorization": f"Bearer {create_refresh_token(user.id)}"}

    resp = client.get("/api/auth/user", headers=headers)

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token type"


def test_access_token_cannot_be_refreshed(client, user):
    access = bearer(user.id)["Authorization"].removeprefix("Bearer ")

    resp = client.post("/api/auth/refresh", json={"refreshToken": access})

    assert resp.status_code == 403


@pytest.mark.parametrize("body", [None, {}, {"refreshToken": ""}])
def test_refresh_without_token_is_401(client, body):
    resp = client.post("/api/auth/refresh", json=body)

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Refresh token required"


def test_garbage_refresh_token_is_403(client):
    resp = client.post("/api/auth/refresh", json={"refreshToken": "not-a-jwt"})

    assert resp.status_code == 403
    assert resp.json()["detail"] == "Invalid refresh token"


def test_refresh_for_deleted_user_is_401(client, db, user):
    token = create_refresh_token(user.id)
    db.delete(user)
    db.commit()

    resp = client.post("/api/auth/refresh", json={"refreshToken": token})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "User not found"
