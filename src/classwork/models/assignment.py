from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import JSON, DateTime, UniqueConstraint
from sqlmodel import Field

from src.classwork.models.base import NaiveUtcModel, TimestampedModel, new_id
from src.classwork.models.enums import SubmissionStatus


class Assignment(TimestampedModel, table=True):
    __tablename__ = "assignments"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    stream_item_id: str = Field(foreign_key="stream_items.id", unique=True)
    points: Optional[float] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    instructions: Optional[str] = None
    assign_to_all: bool = Field(default=True)
    assigned_groups: List[str] = Field(default_factory=list, sa_type=JSON)
    is_deleted: bool = Field(default=False)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)


class AssignmentStudent(NaiveUtcModel, table=True):
    __tablename__ = "assignment_students"
    __table_args__ = (UniqueConstraint("assignment_id", "student_id"), {"extend_existing": True})

    id: str = Field(default_factory=new_id, primary_key=True)
    assignment_id: str = Field(foreign_key="assignments.id", index=True)
    student_id: str = Field(foreign_key="users.id", index=True)
    source_group: Optional[str] = None


class AssignmentSubmission(TimestampedModel, table=True):
    __tablename__ = "assignment_submissions"
    __table_args__ = (UniqueConstraint("assignment_id", "student_id"), {"extend_existing": True})

    id: str = Field(default_factory=new_id, primary_key=True)
    assignment_id: str = Field(foreign_key="assignments.id", index=True)
    student_id: str = Field(foreign_key="users.id", index=True)
    content: Optional[str] = None
    attachments: Any = Field(default=None, sa_type=JSON, nullable=True)
    status: str = Field(default=SubmissionStatus.DRAFT.value)
    grade: Optional[float] = None
    student_comments: Optional[str] = None
    teacher_comments: Optional[str] = None
    submitted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    graded_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    returned_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
