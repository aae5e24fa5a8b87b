import uuid
from datetime import UTC, datetime, timedelta

from app.exceptions import MissingTokenError
from app.services.tokens import TokenService


def test_register_returns_token_and_user_id(client):
    resp = client.post(
        "/auth/register", json={"name": "Jo", "email": "jo@x.com", "password": "p1"}
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["token"]
    assert uuid.UUID(data["userId"])


def test_register_duplicate_email(client, register, user_store):
    register(email="jo@example.com")
    resp = client.post(
        "/auth/register",
        json={"name": "Other Jo", "email": "jo@example.com", "password": "p2"},
    )
    assert resp.status_code == 400
    assert resp.json()["reason"] == "DuplicateEmail"
    assert len(user_store) == 1


def test_register_validation_error(client):
    resp = client.post(
        "/auth/register", json={"name": "Jo", "email": "not-an-email", "password": "p1"}
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["reason"] == "ValidationError"
    assert "email" in body["message"]


def test_login_returns_token_for_same_user(client):
    registered = client.post(
        "/auth/register", json={"name": "Jo", "email": "jo@example.com", "password": "p1"}
    ).json()

    resp = client.post("/auth/login", json={"email": "jo@example.com", "password": "p1"})

    assert resp.status_code == 200
    assert resp.json()["userId"] == registered["userId"]
    assert resp.json()["token"]


def test_login_failures_are_indistinguishable(client, register):
    register(email="jo@example.com", password="p1")

    wrong_password = client.post(
        "/auth/login", json={"email": "jo@example.com", "password": "wrong"}
    )
    unknown_user = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "p1"}
    )

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json()["reason"] == "InvalidCredentials"


def test_me_returns_profile_without_password(client, register):
    headers = register(name="Jo", email="jo@example.com")
    resp = client.get("/auth/me", headers=headers)

    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Jo"
    assert data["email"] == "jo@example.com"
    assert "createdAt" in data
    assert not any("password" in key.lower() for key in data)


def test_me_without_token(client):
    resp = client.get("/auth/me")
    assert resp.status_code == 401
    assert resp.json() == MissingTokenError().to_dict()
    assert resp.headers["WWW-Authenticate"] == "Bearer"


def test_non_bearer_scheme_is_missing_token(client):
    resp = client.get("/auth/me", headers={"Authorization": "Basic am86cDE="})
    assert resp.status_code == 401
    assert resp.json()["reason"] == "MissingToken"


def test_invalid_token(client):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 401
    assert resp.json()["reason"] == "InvalidToken"


def test_expired_token(client, settings):
    issued_at = datetime.now(UTC) - timedelta(days=8)
    old_service = TokenService.from_settings(settings, clock=lambda: issued_at)
    token = old_service.issue(uuid.uuid4())

    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
    assert resp.json()["reason"] == "ExpiredToken"


def test_me_for_unknown_subject(client, settings):
    token = TokenService.from_settings(settings).issue(uuid.uuid4())
    resp = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 404
    assert resp.json()["reason"] == "NotFound"


def test_health_without_database(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "not configured"}
