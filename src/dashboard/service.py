# src/dashboard/service.py
import logging
from typing import List

from sqlalchemy import case, distinct, func
from sqlalchemy.orm import Session

from src.classroom.models import Course, Coursework, Submission
from src.users.models import User
from .schemas import CoordinatorMetrics, StudentSummary, TeacherCourseSummary

logger = logging.getLogger(__name__)


def completion_percent(handed_in: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(handed_in / total * 100, 2)


def _count_true(column):
    return func.coalesce(func.sum(case((column.is_(True), 1), else_=0)), 0)


class DashboardService:
    """
    Агрегаты для дашбордов. Только чтение уже сохраненных строк,
    без обращений к Google.
    """

    def __init__(self, db_session: Session):
        self.db = db_session

    def student_summary(self, email: str) -> StudentSummary:
        total, handed_in, late = (
            self.db.query(
                func.count(Submission.id),
                _count_true(Submission.handed_in),
                _count_true(Submission.late),
            )
            .filter(Submission.user_email == email)
            .one()
        )
        total, handed_in, late = int(total), int(handed_in), int(late)
        return StudentSummary(
            email=email,
            totalSubmissions=total,
            handedIn=handed_in,
            pending=total - handed_in,
            late=late,
            completionPercent=completion_percent(handed_in, total),
        )

    def teacher_summary(self) -> List[TeacherCourseSummary]:
        # TODO: scope by Course.teacher_emails once it is decided whether teachers should see only their own courses
        rows = (
            self.db.query(
                Coursework.course_id,
                func.count(distinct(Coursework.id)),
                func.count(Submission.id),
                _count_true(Submission.handed_in),
            )
            .outerjoin(Submission, Submission.coursework_id == Coursework.id)
            .group_by(Coursework.course_id)
            .order_by(Coursework.course_id)
            .all()
        )
        return [
            TeacherCourseSummary(courseId=course_id, tasks=int(tasks), submissions=int(subs), handedIn=int(handed))
            for course_id, tasks, subs, handed in rows
        ]

    def coordinator_metrics(self) -> CoordinatorMetrics:
        users = self.db.query(func.count(User.id)).scalar()
        students = self.db.query(func.count(User.id)).filter(User.role == "student").scalar()
        teachers = self.db.query(func.count(User.id)).filter(User.role == "teacher").scalar()
        courses = self.db.query(func.count(Course.id)).scalar()
        coursework = self.db.query(func.count(Coursework.id)).scalar()
        submissions, handed_in, late = self.db.query(
            func.count(Submission.id),
            _count_true(Submission.handed_in),
            _count_true(Submission.late),
        ).one()
        return CoordinatorMetrics(
            users=users,
            students=students,
            teachers=teachers,
            courses=courses,
            coursework=coursework,
            submissions=int(submissions),
            handedIn=int(handed_in),
            late=int(late),
        )
