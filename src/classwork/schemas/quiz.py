# src/classwork/schemas/quiz.py
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from src.classwork.schemas.common import AuthorRead

# --- Question Schemas ---

class QuestionData(BaseModel):
    id: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: str
    required: bool = False
    points: float = 0
    correct_answer: Any = None
    options: Any = None
    order: Optional[int] = None

# --- Quiz Schemas ---

class QuizData(BaseModel):
    stream_item_id: str
    points: Optional[float] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    description: Optional[str] = None
    assign_to_all: bool = True
    assigned_groups: List[str] = []
    selected_students: List[str] = []
    questions: List[QuestionData] = []


class QuizRead(QuizData):
    id: str
    is_archived: bool = False


class QuizSummary(BaseModel):
    id: str
    stream_item_id: str
    type: str = "quiz"
    class_id: Optional[str] = None
    class_name: str
    title: str
    description: Optional[str] = None
    points: Optional[float] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    assign_to_all: bool
    assigned_groups: List[str] = []
    is_archived: bool = False
    created_at: datetime
    author: Optional[AuthorRead] = None
    student_count: int = 0
    question_count: int = 0
    pending_review_count: int = 0
