from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from src.classwork.context import ClassworkContext
from src.classwork.schemas.quiz import QuizRead, QuizSummary
from src.classwork.schemas.submission import QuizSubmissionData, QuizSubmissionRead, StudentQuizSubmission
from src.classwork.utils.dependencies import get_context

router = APIRouter(tags=["Student Quizzes"])


@router.get("/{student_id}/quizzes", response_model=List[QuizSummary])
def list_my_quizzes(student_id: str, group: Optional[str] = None, ctx: ClassworkContext = Depends(get_context)):
    return ctx.quizzes.get_quizzes_for_student(student_id, group)


@router.get("/{student_id}/quizzes/stream-item/{stream_item_id}", response_model=QuizRead)
def get_quiz_detail(student_id: str, stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    quiz = ctx.quizzes.get_quiz_by_stream_item_id(stream_item_id)
    if not quiz or quiz.id not in {q.id for q in ctx.quizzes.get_quizzes_for_student(student_id)}:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found or is not available.")
    return quiz


@router.get("/{student_id}/quizzes/{quiz_id}/submission", response_model=QuizSubmissionRead)
def get_my_submission(student_id: str, quiz_id: str, ctx: ClassworkContext = Depends(get_context)):
    submission = ctx.quiz_submissions.get_quiz_submission(quiz_id, student_id)
    if not submission:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return submission


@router.put("/{student_id}/quizzes/{quiz_id}/submission", response_model=QuizSubmissionRead)
def save_my_submission(
    student_id: str,
    quiz_id: str,
    payload: StudentQuizSubmission,
    ctx: ClassworkContext = Depends(get_context),
):
    """Saves a draft or submits; repeated calls update the same submission."""
    data = QuizSubmissionData(quiz_id=quiz_id, student_id=student_id, **payload.model_dump(exclude_unset=True))
    return ctx.quiz_submissions.save_quiz_submission(data)
