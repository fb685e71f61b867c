# src/users/schemas.py
from pydantic import BaseModel
from typing import Optional


class MeResponse(BaseModel):
    email: str
    name: Optional[str] = None
    role: str
