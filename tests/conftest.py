# tests/conftest.py
import pytest
from typing import Callable, Dict, Generator, Optional
from unittest.mock import MagicMock

import sys
import os
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Настройки читаются при импорте приложения, поэтому окружение задаем заранее
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("GOOGLE_REDIRECT_URI", "http://testserver/auth/oauth2/callback")
os.environ.setdefault("JWT_KEY", "test-jwt-signing-key-with-enough-length-0123456789")
os.environ.setdefault("DATA_PROTECTION_KEY", "test-data-protection-master-key")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from src.core.config import Settings, get_settings
from src.core.database import Base
from src.core.dependencies import get_db, get_token_protector
from src.core.rate_limit import limiter
from src.core.security import TokenProtector, create_session_token

# Явно импортируем все модели, чтобы Base.metadata знал о всех таблицах
from src.users.models import User  # noqa: F401
from src.classroom.models import Course, Coursework, Submission, Attendance  # noqa: F401
from src.notifications.models import Notification  # noqa: F401

# --- Тестовая база: одна in-memory SQLite на все соединения ---
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def reset_rate_limits() -> Generator[None, None, None]:
    # Все запросы TestClient приходят с одного адреса, счетчики обнуляем между тестами
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(scope="function")
def setup_database() -> Generator[None, None, None]:
    assert len(Base.metadata.tables) > 0, "Модели SQLAlchemy не были импортированы, Base.metadata пуст!"
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(setup_database: None) -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture(scope="function")
def client(setup_database: None) -> Generator[TestClient, None, None]:
    yield TestClient(app)
    # Оставляем только подмену БД, остальное тесты ставят сами
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def protector() -> TokenProtector:
    return get_token_protector()


@pytest.fixture
def auth_headers(settings: Settings) -> Callable[..., Dict[str, str]]:
    def make(email: str = "student@example.com", role: str = "student", name: Optional[str] = "Test User") -> Dict[str, str]:
        token = create_session_token(email=email, name=name, role=role, settings=settings)
        return {"Authorization": f"Bearer {token}"}
    return make


def fake_response(status_code: int = 200, json_body=None) -> MagicMock:
    """Поддельный requests.Response для подмены HTTP-сессии OAuth клиента."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if isinstance(json_body, Exception):
        response.json.side_effect = json_body
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    return fake_response
