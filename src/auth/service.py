import logging
from datetime import timedelta
from typing import Optional, Tuple

from cryptography.fernet import InvalidToken
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from src.core.config import Settings
from src.core.database import utcnow
from src.core.security import TokenProtector, create_session_token
from src.users import crud as users_crud
from src.users.models import User
from .google_oauth import GoogleOAuthClient, GoogleOAuthError

logger = logging.getLogger(__name__)

# Access token обновляется заранее, если до истечения осталось меньше этого окна
REFRESH_WINDOW = timedelta(minutes=1)


class AuthService:
    """
    Сервисный слой для OAuth2 логина через Google и жизненного цикла
    Google-токенов пользователя.
    """

    def __init__(self, db_session: Session, settings: Settings,
                 oauth_client: GoogleOAuthClient, protector: TokenProtector):
        """
        Args:
            db_session: Активная сессия SQLAlchemy.
            settings: Настройки приложения (только чтение).
            oauth_client: Клиент OAuth endpoint'ов Google.
            protector: Шифрование refresh token'ов (purpose "GoogleRefreshToken").
        """
        self.db = db_session
        self.settings = settings
        self.oauth = oauth_client
        self.protector = protector

    def consent_url(self) -> str:
        return self.oauth.build_consent_url()

    def handle_callback(self, code: Optional[str], error: Optional[str]) -> Tuple[User, str]:
        """
        Обменивает authorization code на токены, создает или обновляет
        пользователя и выпускает session token.

        Raises:
            HTTPException: 400 при ошибке от Google или отсутствии code,
                502 если token/userinfo endpoint Google ответил ошибкой.

        Returns:
            Пользователь и подписанный session token.
        """
        if error:
            logger.warning(f"Google OAuth callback returned error: {error}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Google OAuth error: {error}")
        if not code or not code.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Code missing from Google OAuth")

        # 1. Обмен code на токены, затем userinfo. До этого момента БД не трогаем.
        try:
            tokens = self.oauth.exchange_code(code)
            user_info = self.oauth.fetch_userinfo(tokens.access_token)
        except GoogleOAuthError as e:
            logger.error(f"Google OAuth callback failed: {e}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

        if not user_info.email:
            logger.error("Google userinfo response contains no email")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY,
                                detail="Google userinfo did not return an email address")

        # 2. Upsert пользователя по email
        encrypted_refresh = self.protector.protect(tokens.refresh_token) if tokens.refresh_token else None
        if not tokens.refresh_token:
            logger.info(f"No refresh token returned for {user_info.email}; keeping the stored one")

        user = users_crud.upsert_google_user(
            self.db,
            email=user_info.email,
            name=user_info.name,
            access_token=tokens.access_token,
            encrypted_refresh_token=encrypted_refresh,
            token_expiry=utcnow() + timedelta(seconds=tokens.expires_in),
        )

        # 3. Session token для фронтенда
        session_token = create_session_token(
            email=user.email, name=user.name, role=user.role, settings=self.settings
        )
        logger.info(f"User {user.email} signed in with role '{user.role}'")
        return user, session_token

    def ensure_access_token(self, user: User) -> Optional[str]:
        """
        Возвращает пригодный access token для делегированных вызовов Google API,
        при необходимости обновляя его через refresh token.

        Returns:
            Access token или None, если получить валидный токен не удалось.
        """
        now = utcnow()
        if user.token_expiry is not None and user.token_expiry > now + REFRESH_WINDOW and user.google_access_token:
            return user.google_access_token

        refreshed = self._refresh(user)
        if refreshed:
            return refreshed

        # Обновить не удалось: старый токен годится, только если он еще не истек
        if user.google_access_token and user.token_expiry is not None and user.token_expiry > now:
            return user.google_access_token
        logger.warning(f"No usable Google access token for {user.email}")
        return None

    def _refresh(self, user: User) -> Optional[str]:
        if not user.google_refresh_token:
            logger.info(f"User {user.email} has no stored refresh token")
            return None

        try:
            refresh_token = self.protector.unprotect(user.google_refresh_token)
        except InvalidToken:
            logger.error(f"Stored refresh token for {user.email} could not be decrypted")
            return None

        try:
            logger.info(f"Refreshing Google access token for {user.email}")
            tokens = self.oauth.refresh_access_token(refresh_token)
        except GoogleOAuthError as e:
            logger.error(f"Google token refresh failed for {user.email}: {e}")
            if e.error == "invalid_grant":
                logger.error("Refresh token is invalid or revoked; the user has to sign in again.")
            return None

        users_crud.save_refreshed_tokens(
            self.db,
            user,
            access_token=tokens.access_token,
            encrypted_refresh_token=self.protector.protect(tokens.refresh_token) if tokens.refresh_token else None,
            token_expiry=utcnow() + timedelta(seconds=tokens.expires_in),
        )
        logger.info(f"Access token refreshed for {user.email}")
        return tokens.access_token
