# tests/test_app.py
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from jose import jwt

from main import app
from src.core.dependencies import get_current_claims


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_me_returns_identity_without_google_tokens(client: TestClient, auth_headers):
    response = client.get("/api/me", headers=auth_headers("ana@example.com", role="teacher", name="Ana"))

    assert response.status_code == 200
    assert response.json() == {"email": "ana@example.com", "name": "Ana", "role": "teacher"}


def test_me_requires_session_token(client: TestClient):
    response = client.get("/api/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_unhandled_error_is_generic_500(client: TestClient):
    def broken_claims():
        raise RuntimeError("database password is hunter2")

    app.dependency_overrides[get_current_claims] = broken_claims
    safe_client = TestClient(app, raise_server_exceptions=False)

    response = safe_client.get("/api/me")

    assert response.status_code == 500
    assert response.json() == {"detail": "An error occurred while processing your request"}
    assert "hunter2" not in response.text
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_token_from_other_issuer_is_unauthorized(client: TestClient, settings):
    token = jwt.encode(
        {"sub": "ana@example.com", "email": "ana@example.com", "role": "student",
         "iss": "someone-else", "aud": settings.JWT_AUDIENCE,
         "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.JWT_KEY, algorithm="HS256",
    )

    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
