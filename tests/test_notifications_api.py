# tests/test_notifications_api.py
import pytest
from sqlalchemy.orm import Session

from src.notifications.models import Notification
from src.users.models import User

STUDENT = "alumno@example.com"
OTHER = "otro@example.com"


@pytest.fixture
def users(db_session: Session):
    db_session.add_all([
        User(email=STUDENT, role="student"),
        User(email=OTHER, role="student"),
        User(email="prof@example.com", role="teacher"),
    ])
    db_session.commit()


def test_student_cannot_notify_someone_else(client, db_session, users, auth_headers):
    response = client.post(
        "/api/notifications/send",
        json={"userEmail": OTHER, "message": "hola"},
        headers=auth_headers(STUDENT),
    )

    assert response.status_code == 403
    assert db_session.query(Notification).count() == 0


def test_student_can_notify_self(client, db_session, users, auth_headers):
    response = client.post(
        "/api/notifications/send",
        json={"message": "Recordatorio", "link": "https://classroom.google.com"},
        headers=auth_headers(STUDENT),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["userEmail"] == STUDENT
    assert body["message"] == "Recordatorio"
    assert body["link"] == "https://classroom.google.com"
    stored = db_session.query(Notification).one()
    assert stored.read is False
    assert stored.sent_at is not None


def test_teacher_can_notify_student(client, db_session, users, auth_headers):
    response = client.post(
        "/api/notifications/send",
        json={"userEmail": OTHER, "message": "Entrega pendiente"},
        headers=auth_headers("prof@example.com", role="teacher"),
    )

    assert response.status_code == 200
    assert db_session.query(Notification).filter(Notification.user_email == OTHER).count() == 1


def test_free_text_role_can_only_notify_self(client, db_session, users, auth_headers):
    headers = auth_headers(STUDENT, role="other")

    to_other = client.post("/api/notifications/send", json={"userEmail": OTHER, "message": "hola"}, headers=headers)
    to_self = client.post("/api/notifications/send", json={"message": "hola"}, headers=headers)

    assert to_other.status_code == 403
    assert to_self.status_code == 200
    assert db_session.query(Notification).filter(Notification.user_email == OTHER).count() == 0


def test_unknown_target_is_not_found(client, users, auth_headers):
    response = client.post(
        "/api/notifications/send",
        json={"userEmail": "ghost@example.com", "message": "hola"},
        headers=auth_headers("prof@example.com", role="teacher"),
    )

    assert response.status_code == 404


def test_blank_message_is_rejected(client, users, auth_headers):
    response = client.post("/api/notifications/send", json={"message": "   "}, headers=auth_headers(STUDENT))

    assert response.status_code == 400
    assert response.json()["detail"] == "Message is required"


def test_list_and_mark_read_only_own_notifications(client, db_session, users, auth_headers):
    db_session.add_all([
        Notification(user_email=STUDENT, message="first"),
        Notification(user_email=OTHER, message="not yours"),
    ])
    db_session.commit()
    own_id = db_session.query(Notification).filter(Notification.user_email == STUDENT).one().id
    other_id = db_session.query(Notification).filter(Notification.user_email == OTHER).one().id

    listed = client.get("/api/notifications", headers=auth_headers(STUDENT)).json()
    assert [n["message"] for n in listed] == ["first"]
    assert listed[0]["read"] is False

    marked = client.post(f"/api/notifications/{own_id}/read", headers=auth_headers(STUDENT))
    assert marked.status_code == 200
    assert marked.json()["read"] is True

    assert client.post(f"/api/notifications/{other_id}/read", headers=auth_headers(STUDENT)).status_code == 404
