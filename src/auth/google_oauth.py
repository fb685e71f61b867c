# src/auth/google_oauth.py
import logging
from typing import Optional
from urllib.parse import urlencode

import requests

from src.core.config import Settings
from .schemas import GoogleTokenResponse, GoogleUserInfo

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
USERINFO_URI = "https://www.googleapis.com/oauth2/v2/userinfo"


class GoogleOAuthError(Exception):
    """Google OAuth endpoint failed: non-2xx, timeout, transport error or unusable body."""

    def __init__(self, message: str, *, error: Optional[str] = None,
                 description: Optional[str] = None, status_code: Optional[int] = None):
        self.error = error
        self.description = description
        self.status_code = status_code
        details = ": ".join(p for p in (error, description) if p)
        super().__init__(f"{message} ({details})" if details else message)


def _upstream_error(response: requests.Response) -> tuple[Optional[str], Optional[str]]:
    """Достает error / error_description из тела ответа Google, если оно JSON."""
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    error = body.get("error")
    description = body.get("error_description")
    # userinfo отдает ошибку в формате {"error": {"code": ..., "message": ..., "status": ...}}
    if isinstance(error, dict):
        description = error.get("message")
        error = error.get("status")
    return error, description


class GoogleOAuthClient:
    """
    Тонкий клиент для OAuth2 endpoint'ов Google.

    Все запросы ограничены таймаутом из настроек. Повторных попыток нет:
    любая ошибка сразу поднимается как GoogleOAuthError.
    """

    def __init__(self, settings: Settings, session=None):
        self.settings = settings
        self.timeout = settings.GOOGLE_HTTP_TIMEOUT
        self.http = session or requests

    def build_consent_url(self) -> str:
        params = {
            "client_id": self.settings.GOOGLE_CLIENT_ID,
            "response_type": "code",
            "scope": " ".join(self.settings.SCOPES),
            "redirect_uri": self.settings.GOOGLE_REDIRECT_URI,
            # offline + consent, иначе Google не выдает refresh token повторно
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{AUTH_URI}?{urlencode(params)}"

    def exchange_code(self, code: str) -> GoogleTokenResponse:
        data = {
            "code": code,
            "client_id": self.settings.GOOGLE_CLIENT_ID,
            "client_secret": self.settings.GOOGLE_CLIENT_SECRET,
            "redirect_uri": self.settings.GOOGLE_REDIRECT_URI,
            "grant_type": "authorization_code",
        }
        return self._token_request(data, action="Google token exchange")

    def refresh_access_token(self, refresh_token: str) -> GoogleTokenResponse:
        data = {
            "client_id": self.settings.GOOGLE_CLIENT_ID,
            "client_secret": self.settings.GOOGLE_CLIENT_SECRET,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }
        return self._token_request(data, action="Google token refresh")

    def fetch_userinfo(self, access_token: str) -> GoogleUserInfo:
        try:
            response = self.http.get(
                USERINFO_URI,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Google userinfo request failed: {e}")
            raise GoogleOAuthError("Google userinfo request failed", description=str(e)) from e

        if not response.ok:
            error, description = _upstream_error(response)
            logger.error(f"Google userinfo returned {response.status_code}: {error} {description}")
            raise GoogleOAuthError("Google userinfo request failed", error=error,
                                   description=description, status_code=response.status_code)
        try:
            return GoogleUserInfo.model_validate(response.json())
        except ValueError as e:
            raise GoogleOAuthError("Google userinfo returned an unreadable body",
                                   status_code=response.status_code) from e

    def _token_request(self, data: dict, *, action: str) -> GoogleTokenResponse:
        try:
            response = self.http.post(TOKEN_URI, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{action} request failed: {e}")
            raise GoogleOAuthError(f"{action} failed", description=str(e)) from e

        if not response.ok:
            error, description = _upstream_error(response)
            logger.error(f"{action} returned {response.status_code}: {error} {description}")
            raise GoogleOAuthError(f"{action} failed", error=error,
                                   description=description, status_code=response.status_code)
        try:
            body = response.json()
        except ValueError as e:
            raise GoogleOAuthError(f"{action} returned an unreadable body",
                                   status_code=response.status_code) from e

        if not isinstance(body, dict) or not body.get("access_token"):
            logger.error(f"{action} succeeded but returned no access_token")
            raise GoogleOAuthError(f"{action} returned no access token", status_code=response.status_code)
        return GoogleTokenResponse.model_validate(body)
