# src/auth/schemas.py
from pydantic import BaseModel
from typing import Optional


class GoogleTokenResponse(BaseModel):
    """Ответ token endpoint Google (authorization_code и refresh_token гранты)."""
    access_token: str
    expires_in: int = 3600
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    id_token: Optional[str] = None


class GoogleUserInfo(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


class SessionClaims(BaseModel):
    email: str
    name: Optional[str] = None
    role: str = "student"
