# src/classroom/models.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Date, Boolean, Numeric, JSON, ForeignKey
from src.core.database import Base


class Course(Base):
    __tablename__ = "courses"
    id = Column(String(255), primary_key=True)  # Classroom course id
    name = Column(String(255), nullable=True)
    section = Column(String(255), nullable=True)
    course_state = Column(String(50), nullable=True)
    teacher_emails = Column(JSON, nullable=True)
    last_sync = Column(DateTime, nullable=True)


class Coursework(Base):
    __tablename__ = "coursework"
    id = Column(String(255), primary_key=True)
    course_id = Column(String(255), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)
    max_points = Column(Numeric(10, 2), nullable=True)
    last_sync = Column(DateTime, nullable=True)


class Submission(Base):
    __tablename__ = "submissions"
    id = Column(String(255), primary_key=True)
    coursework_id = Column(String(255), ForeignKey("coursework.id", ondelete="CASCADE"), nullable=False, index=True)
    user_email = Column(String(255), ForeignKey("users.email", ondelete="CASCADE"), nullable=False, index=True)
    state = Column(String(50), nullable=True)
    handed_in = Column(Boolean, nullable=False, default=False)
    late = Column(Boolean, nullable=False, default=False)
    grade = Column(Numeric(10, 2), nullable=True)
    last_update = Column(DateTime, nullable=True)


class Attendance(Base):
    __tablename__ = "attendance"
    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(String(255), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_email = Column(String(255), ForeignKey("users.email", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=True)
    present = Column(Boolean, nullable=True)
