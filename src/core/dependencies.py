# src/core/dependencies.py
from functools import lru_cache
from typing import Callable, Generator, Optional

from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.orm import Session

from src.core.database import get_db_session
from src.core.config import Settings, get_settings
from src.core.security import (
    REFRESH_TOKEN_PURPOSE,
    InvalidSessionToken,
    TokenProtector,
    decode_session_token,
)
from src.auth.schemas import SessionClaims
from src.auth.google_oauth import GoogleOAuthClient
from src.auth.service import AuthService
from src.classroom.service import ClassroomAdapter
from src.users import models as user_models
from src.users import crud as users_crud

PRIVILEGED_ROLES = ("teacher", "coordinator", "admin")
COORDINATOR_ROLES = ("coordinator", "admin")


# Зависимость для получения сессии БД
def get_db() -> Generator[Session, None, None]:
    with get_db_session() as db:
        yield db


@lru_cache
def get_token_protector() -> TokenProtector:
    # Строится один раз при первом запросе и дальше только читается
    return TokenProtector(get_settings().DATA_PROTECTION_KEY, REFRESH_TOKEN_PURPOSE)


def get_google_oauth_client(settings: Settings = Depends(get_settings)) -> GoogleOAuthClient:
    return GoogleOAuthClient(settings)


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    oauth_client: GoogleOAuthClient = Depends(get_google_oauth_client),
    protector: TokenProtector = Depends(get_token_protector),
) -> AuthService:
    return AuthService(db, settings, oauth_client, protector)


def get_current_claims(
    authorization: Optional[str] = Header(None), settings: Settings = Depends(get_settings)
) -> SessionClaims:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not authorization:
        raise unauthorized
    scheme, _, token = authorization.partition(' ')
    if not scheme or scheme.lower() != 'bearer' or not token:
        raise unauthorized
    try:
        return decode_session_token(token.strip(), settings)
    except InvalidSessionToken:
        raise unauthorized


def get_current_user(
    claims: SessionClaims = Depends(get_current_claims), db: Session = Depends(get_db)
) -> user_models.User:
    user = users_crud.get_user_by_email(db, claims.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not registered")
    return user


def require_roles(*roles: str) -> Callable[..., SessionClaims]:
    """Пропускает только запросы, у которых role из session token входит в `roles`."""
    def checker(claims: SessionClaims = Depends(get_current_claims)) -> SessionClaims:
        if claims.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return claims
    return checker


def get_classroom_adapter(
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> ClassroomAdapter:
    return ClassroomAdapter(auth_service, settings.GOOGLE_HTTP_TIMEOUT)
