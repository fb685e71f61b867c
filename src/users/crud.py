# src/users/crud.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import datetime
from typing import Optional
import logging
from .models import User

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "student"


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def user_exists(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None


def _apply_login(user: User, *, name: Optional[str], access_token: str,
                 encrypted_refresh_token: Optional[str], token_expiry: datetime) -> None:
    user.google_access_token = access_token
    user.token_expiry = token_expiry
    # Google не всегда присылает refresh token повторно, старый не затираем
    if encrypted_refresh_token:
        user.google_refresh_token = encrypted_refresh_token
    if name:
        user.name = name


def upsert_google_user(db: Session, *, email: str, name: Optional[str], access_token: str,
                       encrypted_refresh_token: Optional[str], token_expiry: datetime) -> User:
    user = get_user_by_email(db, email)
    if user:
        logger.info(f"Updating Google tokens for user: {email}")
        _apply_login(user, name=name, access_token=access_token,
                     encrypted_refresh_token=encrypted_refresh_token, token_expiry=token_expiry)
    else:
        logger.info(f"Creating new user: {email}")
        user = User(
            email=email,
            name=name,
            role=DEFAULT_ROLE,
            google_access_token=access_token,
            google_refresh_token=encrypted_refresh_token,
            token_expiry=token_expiry,
        )
        db.add(user)

    try:
        db.commit()
    except IntegrityError:
        # Параллельный callback для того же email успел создать строку первым
        db.rollback()
        logger.warning(f"User {email} was created concurrently, applying login as an update")
        user = get_user_by_email(db, email)
        if user is None:
            raise
        _apply_login(user, name=name, access_token=access_token,
                     encrypted_refresh_token=encrypted_refresh_token, token_expiry=token_expiry)
        try:
            db.commit()
        except Exception as e:
            logger.error(f"Database commit failed during upsert for user {email}: {e}", exc_info=True)
            db.rollback()
            raise
    except Exception as e:
        logger.error(f"Database commit failed during upsert for user {email}: {e}", exc_info=True)
        db.rollback()
        raise

    db.refresh(user)
    return user


def save_refreshed_tokens(db: Session, user: User, *, access_token: str,
                          encrypted_refresh_token: Optional[str], token_expiry: datetime) -> User:
    user.google_access_token = access_token
    user.token_expiry = token_expiry
    if encrypted_refresh_token:
        user.google_refresh_token = encrypted_refresh_token
    try:
        db.commit()
        db.refresh(user)
        return user
    except Exception as e:
        logger.error(f"Database commit failed while saving refreshed tokens for {user.email}: {e}", exc_info=True)
        db.rollback()
        raise
