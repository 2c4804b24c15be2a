# src/classwork/schemas/assignment.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from src.classwork.schemas.common import AuthorRead


class AssignmentData(BaseModel):
    stream_item_id: str
    points: Optional[float] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    instructions: Optional[str] = None
    assign_to_all: bool = True
    assigned_groups: List[str] = []
    selected_students: List[str] = []


class AssignmentRead(AssignmentData):
    id: str
    is_archived: bool = False
    is_deleted: bool = False


class AssignmentSummary(BaseModel):
    id: str
    stream_item_id: str
    type: str = "assignment"
    class_id: Optional[str] = None
    class_name: str
    title: str
    instructions: Optional[str] = None
    points: Optional[float] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    assign_to_all: bool
    assigned_groups: List[str] = []
    is_archived: bool = False
    created_at: datetime
    author: Optional[AuthorRead] = None
    student_count: int = 0
    pending_review_count: int = 0
