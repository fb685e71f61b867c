# src/core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", frozen=True)

    # Database
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "classroom_db"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""

    # Google
    GOOGLE_CLIENT_ID: str
    GOOGLE_CLIENT_SECRET: str
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/auth/oauth2/callback"
    GOOGLE_HTTP_TIMEOUT: float = 30.0

    # Scopes
    SCOPES: List[str] = [
        'openid',
        'email',
        'profile',
        'https://www.googleapis.com/auth/classroom.courses.readonly',
        'https://www.googleapis.com/auth/classroom.rosters.readonly',
        'https://www.googleapis.com/auth/classroom.coursework.me',
        'https://www.googleapis.com/auth/classroom.coursework.students',
        'https://www.googleapis.com/auth/classroom.student-submissions.students.readonly',
    ]

    # Session tokens
    JWT_KEY: str
    JWT_ISSUER: str = "classroom-dashboard"
    JWT_AUDIENCE: str = "classroom-dashboard-frontend"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 120

    # Refresh token encryption at rest
    DATA_PROTECTION_KEY: str

    # Frontend / CORS
    ALLOWED_ORIGINS: str = ""
    FRONTEND_URL: str = "http://localhost:5173"
    FRONTEND_LOGIN_PATH: str = "/login"

    # Requests per client per minute across /api/* routes
    RATE_LIMIT_PER_MINUTE: int = 100

    LOG_LEVEL: str = "INFO"

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            url = self.DATABASE_URL.strip()
            # Heroku/Neon style URLs are not accepted by SQLAlchemy as-is
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Единственный экземпляр настроек; после старта только читается."""
    return Settings()
