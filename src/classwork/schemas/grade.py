from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class StudentGradeItem(BaseModel):
    id: str
    type: str  # "quiz" or "assignment"
    title: str
    max_points: float
    points_earned: Optional[float] = None
    status: str
    due_date: Optional[date] = None
    submitted_at: Optional[datetime] = None
    feedback: Optional[str] = None


class GradeRead(BaseModel):
    id: str
    class_id: Optional[str] = None
    student_id: str
    quiz_id: Optional[str] = None
    assignment_id: Optional[str] = None
    points_earned: Optional[float] = None
    max_points: Optional[float] = None
    percentage: Optional[float] = None
    status: str
    feedback: Optional[str] = None
    submitted_at: Optional[datetime] = None
    graded_at: Optional[datetime] = None
    graded_by_id: Optional[str] = None

    class Config:
        from_attributes = True
