from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from src.classwork.models.base import TimestampedModel, new_id


class Grade(TimestampedModel, table=True):
    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint("student_id", "quiz_id"),
        UniqueConstraint("student_id", "assignment_id"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    class_id: Optional[str] = Field(default=None, foreign_key="classes.id", index=True)
    student_id: str = Field(foreign_key="users.id", index=True)
    quiz_id: Optional[str] = Field(default=None, foreign_key="quizzes.id", index=True)
    assignment_id: Optional[str] = Field(default=None, foreign_key="assignments.id", index=True)
    points_earned: Optional[float] = None
    max_points: Optional[float] = None
    percentage: Optional[float] = None
    status: str = Field(default="graded")
    feedback: Optional[str] = None
    submitted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    graded_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    graded_by_id: Optional[str] = Field(default=None, foreign_key="users.id")
