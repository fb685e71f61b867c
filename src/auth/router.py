# src/auth/router.py
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from src.core.config import Settings, get_settings
from src.core.dependencies import get_auth_service
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.get("/google", summary="Redirect to the Google consent screen")
def google_login(auth_service: AuthService = Depends(get_auth_service)):
    return RedirectResponse(url=auth_service.consent_url(), status_code=302)


@router.get("/oauth2/callback", summary="Google OAuth2 callback")
def google_callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """
    Exchanges the authorization code, stores the user and redirects the browser
    to the frontend with the session token. Google tokens never leave the backend.
    """
    user, session_token = auth_service.handle_callback(code, error)
    query = urlencode({
        "token": session_token,
        "email": user.email,
        "name": user.name or "",
        "role": user.role,
    })
    target = f"{settings.FRONTEND_URL.rstrip('/')}{settings.FRONTEND_LOGIN_PATH}?{query}"
    return RedirectResponse(url=target, status_code=302)
