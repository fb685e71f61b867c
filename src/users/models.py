# src/users/models.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from src.core.database import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(50), nullable=False, default="student", server_default="student")
    # Только шифротекст (Fernet), открытый refresh token в БД не попадает
    google_refresh_token = Column(Text, nullable=True)
    google_access_token = Column(Text, nullable=True)
    token_expiry = Column(DateTime, nullable=True)
