# tests/test_classroom_api.py
from datetime import timedelta

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from googleapiclient.errors import HttpError
from pytest_mock import MockerFixture
from sqlalchemy.orm import Session

from src.auth.service import AuthService
from src.classroom.service import ClassroomAdapter
from src.core.database import utcnow
from src.core.dependencies import get_auth_service, get_classroom_adapter
from src.users.models import User

TEST_EMAIL = "ana@example.com"


@pytest.fixture
def fake_classroom(client: TestClient, mocker: MockerFixture):
    """Адаптер настоящий (с обновлением токенов), подменен только клиент Classroom API."""
    fake_service = mocker.MagicMock()

    def override(auth_service: AuthService = Depends(get_auth_service)) -> ClassroomAdapter:
        return ClassroomAdapter(auth_service, timeout=5, service_factory=lambda token, timeout: fake_service)

    client.app.dependency_overrides[get_classroom_adapter] = override
    return fake_service


def _add_user(db: Session, **fields) -> User:
    user = User(email=TEST_EMAIL, name="Ana", role="student", **fields)
    db.add(user)
    db.commit()
    return user


def test_courses_without_credential_is_empty_list(client, db_session, auth_headers, fake_classroom):
    _add_user(db_session)

    response = client.get("/api/courses", headers=auth_headers(TEST_EMAIL))

    assert response.status_code == 200
    assert response.json() == []
    fake_classroom.list_active_courses.assert_not_called()


def test_courses_with_valid_token(client, db_session, auth_headers, fake_classroom):
    _add_user(db_session, google_access_token="ya29.valid", token_expiry=utcnow() + timedelta(hours=1))
    fake_classroom.list_active_courses.return_value = [
        {"id": "c1", "name": "Math", "section": "A", "courseState": "ACTIVE"},
    ]

    response = client.get("/api/courses", headers=auth_headers(TEST_EMAIL))

    assert response.status_code == 200
    assert response.json() == [{"id": "c1", "name": "Math", "section": "A", "courseState": "ACTIVE"}]


def test_coursework_without_credential_is_empty_list(client, db_session, auth_headers, fake_classroom):
    _add_user(db_session, google_access_token="ya29.expired", token_expiry=utcnow() - timedelta(hours=1))

    response = client.get("/api/courses/c1/coursework", headers=auth_headers(TEST_EMAIL))

    assert response.status_code == 200
    assert response.json() == []


def test_coursework_with_valid_token(client, db_session, auth_headers, fake_classroom):
    _add_user(db_session, google_access_token="ya29.valid", token_expiry=utcnow() + timedelta(hours=1))
    fake_classroom.list_coursework.return_value = [
        {"id": "w1", "title": "Essay", "description": None, "dueDate": "2024-03-05", "maxPoints": 10},
    ]

    response = client.get("/api/courses/c1/coursework", headers=auth_headers(TEST_EMAIL))

    assert response.status_code == 200
    assert response.json()[0]["title"] == "Essay"
    assert response.json()[0]["maxPoints"] == 10
    fake_classroom.list_coursework.assert_called_once_with("c1")


def test_google_permission_error_maps_to_forbidden(client, db_session, auth_headers, fake_classroom, mocker):
    _add_user(db_session, google_access_token="ya29.valid", token_expiry=utcnow() + timedelta(hours=1))
    resp = mocker.MagicMock(status=403, reason="Forbidden")
    fake_classroom.list_active_courses.side_effect = HttpError(resp, b'{"error": {"code": 403, "message": "forbidden"}}')

    response = client.get("/api/courses", headers=auth_headers(TEST_EMAIL))

    assert response.status_code == 403


def test_unregistered_caller_is_unauthorized(client, db_session, auth_headers, fake_classroom):
    response = client.get("/api/courses", headers=auth_headers("ghost@example.com"))

    assert response.status_code == 401


def test_courses_require_session_token(client):
    assert client.get("/api/courses").status_code == 401
    assert client.get("/api/courses", headers={"Authorization": "Basic abc"}).status_code == 401
    assert client.get("/api/courses", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
