from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from src.classwork.context import ClassworkContext
from src.classwork.schemas.quiz import QuizData, QuizRead, QuizSummary
from src.classwork.schemas.submission import QuizSubmissionRead, ReviewRequest
from src.classwork.utils.dependencies import get_context

# --- Router Definitions ---
quiz_router = APIRouter(tags=["Admin Quizzes"])
submission_router = APIRouter(tags=["Admin Quiz Submissions"])


# --- Quiz Management Endpoints ---

@quiz_router.post("", response_model=QuizRead)
def save_quiz(quiz_data: QuizData, ctx: ClassworkContext = Depends(get_context)):
    """Creates or replaces the quiz of a stream item, questions and students included."""
    ctx.quizzes.save_quiz(quiz_data)
    return ctx.quizzes.get_quiz_by_stream_item_id(quiz_data.stream_item_id)


@quiz_router.get("", response_model=List[QuizSummary])
def list_quizzes(include_archived: bool = False, ctx: ClassworkContext = Depends(get_context)):
    return ctx.quizzes.get_all_quizzes(include_archived=include_archived)


@quiz_router.get("/class/{class_id}", response_model=List[QuizSummary])
def list_class_quizzes(class_id: str, include_archived: bool = False, ctx: ClassworkContext = Depends(get_context)):
    return ctx.quizzes.get_quizzes_by_class(class_id, include_archived=include_archived)


@quiz_router.get("/stream-item/{stream_item_id}", response_model=QuizRead)
def get_quiz(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    quiz = ctx.quizzes.get_quiz_by_stream_item_id(stream_item_id)
    if not quiz:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    return quiz


@quiz_router.get("/{quiz_id}/submissions", response_model=List[QuizSubmissionRead])
def list_quiz_submissions(quiz_id: str, ctx: ClassworkContext = Depends(get_context)):
    """Submissions for grading, most recent first."""
    return ctx.quiz_submissions.get_quiz_submissions_by_quiz(quiz_id)


# --- Review Endpoints ---

@submission_router.post("/{submission_id}/to-review", response_model=QuizSubmissionRead)
def mark_to_review(submission_id: str, ctx: ClassworkContext = Depends(get_context)):
    return ctx.quiz_submissions.mark_as_to_review(submission_id)


@submission_router.post("/{submission_id}/review", response_model=QuizSubmissionRead)
def review_submission(submission_id: str, review: ReviewRequest, ctx: ClassworkContext = Depends(get_context)):
    return ctx.quiz_submissions.mark_as_reviewed(
        submission_id,
        teacher_comments=review.teacher_comments,
        grade=review.grade,
        graded_by_id=review.graded_by_id,
    )
