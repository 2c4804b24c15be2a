# src/classwork/schemas/submission.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from src.classwork.models.enums import SubmissionStatus
from src.classwork.schemas.common import StudentRead

# --- Quiz submissions ---

class QuizSubmissionData(BaseModel):
    quiz_id: str
    student_id: str
    answers: Any = None
    status: Optional[SubmissionStatus] = None  # None keeps the stored status
    grade: Optional[float] = None
    student_comments: Optional[str] = None
    teacher_comments: Optional[str] = None


class QuizSubmissionRead(BaseModel):
    id: str
    quiz_id: str
    student_id: str
    answers: Any = None
    status: str
    grade: Optional[float] = None
    student_comments: Optional[str] = None
    teacher_comments: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    student: Optional[StudentRead] = None

    class Config:
        from_attributes = True

# --- Assignment submissions ---

class SubmissionAttachment(BaseModel):
    type: str
    name: str
    url: Optional[str] = None


class AssignmentSubmissionData(BaseModel):
    assignment_id: str
    student_id: str
    content: Optional[str] = None
    attachments: Optional[List[SubmissionAttachment]] = None
    status: Optional[SubmissionStatus] = None
    grade: Optional[float] = None
    student_comments: Optional[str] = None
    teacher_comments: Optional[str] = None


class AssignmentSubmissionRead(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    content: Optional[str] = None
    attachments: Any = None
    status: str
    grade: Optional[float] = None
    student_comments: Optional[str] = None
    teacher_comments: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    student: Optional[StudentRead] = None

    class Config:
        from_attributes = True

# --- Review ---

class ReviewRequest(BaseModel):
    teacher_comments: Optional[str] = None
    grade: Optional[float] = None
    graded_by_id: Optional[str] = None

# --- Student-facing payloads (ids come from the path) ---

class StudentQuizSubmission(BaseModel):
    answers: Any = None
    status: Optional[SubmissionStatus] = None
    student_comments: Optional[str] = None


class StudentAssignmentSubmission(BaseModel):
    content: Optional[str] = None
    attachments: Optional[List[SubmissionAttachment]] = None
    status: Optional[SubmissionStatus] = None
    student_comments: Optional[str] = None
