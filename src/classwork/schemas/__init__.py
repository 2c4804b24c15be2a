# src/classwork/schemas/__init__.py

# Request and response shapes shared by the controllers and routers.
from .common import AuthorRead, StudentRead
from .user import UserCreate
from .classroom import ClassCreate, ClassUpdate
from .stream import AttachmentData, AttachmentRead, StreamItemData, StreamItemRead
from .quiz import QuestionData, QuizData, QuizRead, QuizSummary
from .assignment import AssignmentData, AssignmentRead, AssignmentSummary
from .material import MaterialData, MaterialRead, MaterialSummary
from .submission import (
    QuizSubmissionData,
    QuizSubmissionRead,
    AssignmentSubmissionData,
    AssignmentSubmissionRead,
    ReviewRequest,
    StudentQuizSubmission,
    StudentAssignmentSubmission,
)
from .grade import StudentGradeItem, GradeRead
