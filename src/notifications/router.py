# src/notifications/router.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from sqlalchemy.orm import Session

from src.auth.schemas import SessionClaims
from src.core.dependencies import PRIVILEGED_ROLES, get_current_claims, get_db
from src.core.rate_limit import api_limit
from src.users import crud as users_crud
from . import crud, schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/notifications",
    tags=["Notifications"],
)


def _to_response(notification) -> schemas.NotificationResponse:
    return schemas.NotificationResponse(
        id=notification.id,
        message=notification.message,
        link=notification.link,
        sentAt=notification.sent_at,
        read=notification.read,
    )


@router.post("/send", response_model=schemas.SentNotificationResponse, summary="Send a notification")
@api_limit
def send_notification(
    request: Request,
    payload: schemas.SendNotificationRequest,
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """Teachers, coordinators and admins may notify anyone; everybody else only themselves."""
    if not payload.message or not payload.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    target_email = payload.userEmail.strip() if payload.userEmail and payload.userEmail.strip() else claims.email
    if claims.role not in PRIVILEGED_ROLES and target_email != claims.email:
        logger.warning(f"{claims.email} (role '{claims.role}') tried to notify {target_email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only send notifications to yourself")

    if not users_crud.user_exists(db, target_email):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    notification = crud.create_notification(db, user_email=target_email, message=payload.message, link=payload.link)
    return schemas.SentNotificationResponse(
        id=notification.id,
        userEmail=notification.user_email,
        message=notification.message,
        link=notification.link,
    )


@router.get("", response_model=List[schemas.NotificationResponse], summary="Caller's notifications")
@api_limit
def list_notifications(request: Request, claims: SessionClaims = Depends(get_current_claims), db: Session = Depends(get_db)):
    return [_to_response(n) for n in crud.list_for_user(db, claims.email)]


@router.post("/{notification_id}/read", response_model=schemas.NotificationResponse, summary="Mark as read")
@api_limit
def mark_notification_read(
    request: Request,
    notification_id: int = Path(..., description="Notification id"),
    claims: SessionClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    notification = crud.mark_read(db, notification_id, claims.email)
    if notification is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return _to_response(notification)
