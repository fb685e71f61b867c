# src/dashboard/schemas.py
from pydantic import BaseModel


class StudentSummary(BaseModel):
    email: str
    totalSubmissions: int
    handedIn: int
    pending: int
    late: int
    completionPercent: float


class TeacherCourseSummary(BaseModel):
    courseId: str
    tasks: int
    submissions: int
    handedIn: int


class CoordinatorMetrics(BaseModel):
    users: int
    students: int
    teachers: int
    courses: int
    coursework: int
    submissions: int
    handedIn: int
    late: int
