# src/notifications/crud.py
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from src.core.database import utcnow
from .models import Notification

logger = logging.getLogger(__name__)


def create_notification(db: Session, *, user_email: str, message: str, link: Optional[str]) -> Notification:
    notification = Notification(
        user_email=user_email,
        message=message,
        link=link,
        sent_at=utcnow(),
        read=False,
    )
    db.add(notification)
    try:
        db.commit()
        db.refresh(notification)
        logger.info(f"Notification {notification.id} stored for {user_email}")
        return notification
    except Exception as e:
        logger.error(f"Database commit failed while storing notification for {user_email}: {e}", exc_info=True)
        db.rollback()
        raise


def list_for_user(db: Session, user_email: str) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_email == user_email)
        .order_by(Notification.sent_at.desc(), Notification.id.desc())
        .all()
    )


def mark_read(db: Session, notification_id: int, user_email: str) -> Optional[Notification]:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_email == user_email)
        .first()
    )
    if notification is None:
        return None
    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification
