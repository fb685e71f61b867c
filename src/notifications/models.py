# src/notifications/models.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from src.core.database import Base, utcnow


class Notification(Base):
    __tablename__ = "notifications"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_email = Column(String(255), ForeignKey("users.email", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    link = Column(String(1000), nullable=True)
    sent_at = Column(DateTime, nullable=False, default=utcnow)
    read = Column(Boolean, nullable=False, default=False)
