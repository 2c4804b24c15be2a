# quiz.py
from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, UniqueConstraint
from sqlmodel import Field

from src.classwork.models.base import NaiveUtcModel, TimestampedModel, new_id
from src.classwork.models.enums import SubmissionStatus


class Quiz(TimestampedModel, table=True):
    __tablename__ = "quizzes"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    stream_item_id: str = Field(foreign_key="stream_items.id", unique=True)
    points: Optional[float] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None  # "HH:MM"
    description: Optional[str] = None
    assign_to_all: bool = Field(default=True)
    assigned_groups: List[str] = Field(default_factory=list, sa_type=JSON)


class QuizQuestion(TimestampedModel, table=True):
    __tablename__ = "quiz_questions"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    quiz_id: str = Field(foreign_key="quizzes.id", index=True)
    title: str
    description: Optional[str] = None
    type: str
    required: bool = Field(default=False)
    points: float = Field(default=0)
    correct_answer: Any = Field(default=None, sa_type=JSON, nullable=True)
    options: Any = Field(default=None, sa_type=JSON, nullable=True)
    order: int = Field(default=0)  # zero-based, dense per quiz


class QuizStudent(NaiveUtcModel, table=True):
    __tablename__ = "quiz_students"
    __table_args__ = (UniqueConstraint("quiz_id", "student_id"), {"extend_existing": True})

    id: str = Field(default_factory=new_id, primary_key=True)
    quiz_id: str = Field(foreign_key="quizzes.id", index=True)
    student_id: str = Field(foreign_key="users.id", index=True)
    source_group: Optional[str] = None  # None: picked individually


class QuizSubmission(TimestampedModel, table=True):
    __tablename__ = "quiz_submissions"
    __table_args__ = (UniqueConstraint("quiz_id", "student_id"), {"extend_existing": True})

    id: str = Field(default_factory=new_id, primary_key=True)
    quiz_id: str = Field(foreign_key="quizzes.id", index=True)
    student_id: str = Field(foreign_key="users.id", index=True)
    answers: Any = Field(default=None, sa_type=JSON, nullable=True)
    status: str = Field(default=SubmissionStatus.DRAFT.value)
    grade: Optional[float] = None
    student_comments: Optional[str] = None
    teacher_comments: Optional[str] = None
    submitted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    graded_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
