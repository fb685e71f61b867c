# src/classroom/schemas.py
from decimal import Decimal
from pydantic import BaseModel, field_serializer
from typing import Optional


class CourseResponse(BaseModel):
    id: str
    name: Optional[str] = None
    section: Optional[str] = None
    courseState: Optional[str] = None


class CourseworkResponse(BaseModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    dueDate: Optional[str] = None  # ISO 8601, время добавляется если задано в Classroom
    maxPoints: Optional[Decimal] = None

    # Внутри Decimal, наружу JSON number, как у Classroom
    @field_serializer("maxPoints", when_used="json")
    def serialize_max_points(self, value: Optional[Decimal]):
        return float(value) if value is not None else None
