# src/classwork/models/__init__.py

# Every table model is imported here so SQLModel's metadata knows each table
# before any backend creates its schema.
from typing import Dict, List, Tuple, Type

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel

# --- Directory ---
from .user import User
from .classroom import Classroom, ClassMember, Topic

# --- Stream and classwork ---
from .stream import StreamItem, Attachment
from .quiz import Quiz, QuizQuestion, QuizStudent, QuizSubmission
from .assignment import Assignment, AssignmentStudent, AssignmentSubmission
from .material import Material, MaterialStudent
from .grade import Grade

from .enums import UserRole, StreamItemType, SubmissionStatus


# Snapshot key -> model. The order is the order collections appear in a snapshot.
COLLECTIONS: Dict[str, Type[SQLModel]] = {
    "users": User,
    "classes": Classroom,
    "classMembers": ClassMember,
    "topics": Topic,
    "streamItems": StreamItem,
    "assignments": Assignment,
    "assignmentStudents": AssignmentStudent,
    "assignmentSubmissions": AssignmentSubmission,
    "quizzes": Quiz,
    "quizQuestions": QuizQuestion,
    "quizStudents": QuizStudent,
    "quizSubmissions": QuizSubmission,
    "materials": Material,
    "materialStudents": MaterialStudent,
    "attachments": Attachment,
    "grades": Grade,
}

_COLLECTION_BY_MODEL = {model: name for name, model in COLLECTIONS.items()}


def collection_of(model: Type[SQLModel]) -> str:
    try:
        return _COLLECTION_BY_MODEL[model]
    except KeyError:
        raise TypeError(f"{model.__name__} is not a stored collection") from None


def unique_keys(model: Type[SQLModel]) -> List[Tuple[str, ...]]:
    """Column groups that must be unique, read from the table definition."""
    table = model.__table__
    keys = []
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint):
            keys.append(tuple(column.name for column in constraint.columns))
    for column in table.columns:
        if column.unique:
            keys.append((column.name,))
    return list(dict.fromkeys(keys))


def relation_columns(model: Type[SQLModel]) -> List[str]:
    """Columns worth indexing for lookups: foreign keys and declared indexes."""
    return [
        column.name
        for column in model.__table__.columns
        if not column.primary_key and (column.foreign_keys or column.index or column.unique)
    ]


__all__ = [
    "User",
    "Classroom",
    "ClassMember",
    "Topic",
    "StreamItem",
    "Attachment",
    "Quiz",
    "QuizQuestion",
    "QuizStudent",
    "QuizSubmission",
    "Assignment",
    "AssignmentStudent",
    "AssignmentSubmission",
    "Material",
    "MaterialStudent",
    "Grade",
    "UserRole",
    "StreamItemType",
    "SubmissionStatus",
    "COLLECTIONS",
    "collection_of",
    "unique_keys",
    "relation_columns",
]
