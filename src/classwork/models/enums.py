from enum import Enum


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    PARENT = "parent"


class StreamItemType(str, Enum):
    ASSIGNMENT = "assignment"
    QUIZ = "quiz"
    MATERIAL = "material"
    ANNOUNCEMENT = "announcement"


class SubmissionStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    TO_REVIEW = "to_review"
    REVIEWED = "reviewed"
    GRADED = "graded"
    RETURNED = "returned"  # assignments only
