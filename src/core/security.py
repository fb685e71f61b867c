# src/core/security.py
import base64
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from jose import JWTError, jwt

from src.core.config import Settings
from src.auth.schemas import SessionClaims

logger = logging.getLogger(__name__)

REFRESH_TOKEN_PURPOSE = "GoogleRefreshToken"


class InvalidSessionToken(Exception):
    """Session token is malformed, badly signed, expired or issued for someone else."""


class TokenProtector:
    """
    Аутентифицированное шифрование секретов для хранения в БД.

    Ключ Fernet выводится из общего мастер-ключа через HKDF, где `purpose`
    используется как info. Шифротекст, полученный с одним purpose, не
    расшифровывается протектором с другим purpose или другим мастер-ключом
    (cryptography.fernet.InvalidToken).
    """

    def __init__(self, master_key: str, purpose: str):
        if not master_key:
            raise ValueError("A master key is required to build a TokenProtector")
        self.purpose = purpose
        derived = HKDF(
            algorithm=hashes.SHA256(),
            length=32,
            salt=None,
            info=purpose.encode("utf-8"),
        ).derive(master_key.encode("utf-8"))
        self._fernet = Fernet(base64.urlsafe_b64encode(derived))

    def protect(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def unprotect(self, ciphertext: str) -> str:
        return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")


def create_session_token(*, email: str, name: Optional[str], role: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": email,
        "email": email,
        "name": name or "",
        "role": role,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session_token(token: str, settings: Settings) -> SessionClaims:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        logger.warning(f"Session token rejected: {e}")
        raise InvalidSessionToken(str(e)) from e

    email = payload.get("email") or payload.get("sub")
    if not email:
        raise InvalidSessionToken("Token carries no subject")
    return SessionClaims(
        email=email,
        name=payload.get("name") or None,
        role=payload.get("role") or "student",
    )
