# src/notifications/schemas.py
from datetime import datetime
from pydantic import BaseModel
from typing import Optional


class SendNotificationRequest(BaseModel):
    userEmail: Optional[str] = None
    message: Optional[str] = None
    link: Optional[str] = None


class SentNotificationResponse(BaseModel):
    id: int
    userEmail: str
    message: str
    link: Optional[str] = None


class NotificationResponse(BaseModel):
    id: int
    message: str
    link: Optional[str] = None
    sentAt: datetime
    read: bool
