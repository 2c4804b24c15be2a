from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from src.classwork.context import ClassworkContext
from src.classwork.schemas.assignment import AssignmentData, AssignmentRead, AssignmentSummary
from src.classwork.schemas.submission import (
    AssignmentSubmissionData,
    AssignmentSubmissionRead,
    ReviewRequest,
    StudentAssignmentSubmission,
)
from src.classwork.utils.dependencies import get_context

router = APIRouter(tags=["Assignments"])


# --- Assignment Management ---

@router.post("", response_model=AssignmentRead)
def save_assignment(data: AssignmentData, ctx: ClassworkContext = Depends(get_context)):
    saved = ctx.assignments.save_assignment(data)
    return ctx.assignments.get_assignment_by_id(saved.id)


@router.get("", response_model=List[AssignmentSummary])
def list_assignments(include_archived: bool = False, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignments.get_all_assignments(include_archived=include_archived)


@router.get("/archived", response_model=List[AssignmentSummary])
def list_archived_assignments(ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignments.get_archived_assignments()


@router.get("/class/{class_id}", response_model=List[AssignmentSummary])
def list_class_assignments(class_id: str, include_archived: bool = False, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignments.get_assignments_by_class(class_id, include_archived=include_archived)


@router.get("/student/{student_id}", response_model=List[AssignmentSummary])
def list_student_assignments(student_id: str, group: Optional[str] = None, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignments.get_assignments_for_student(student_id, group)


@router.get("/stream-item/{stream_item_id}", response_model=AssignmentRead)
def get_assignment_by_stream_item(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    assignment = ctx.assignments.get_assignment_by_stream_item_id(stream_item_id)
    if not assignment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return assignment


@router.post("/stream-item/{stream_item_id}/archive", status_code=status.HTTP_204_NO_CONTENT)
def archive_assignment(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    ctx.assignments.archive_assignment(stream_item_id)


@router.post("/stream-item/{stream_item_id}/unarchive", status_code=status.HTTP_204_NO_CONTENT)
def unarchive_assignment(stream_item_id: str, class_name: Optional[str] = None, ctx: ClassworkContext = Depends(get_context)):
    ctx.assignments.unarchive_assignment(stream_item_id, class_name)


@router.get("/{assignment_id}", response_model=AssignmentRead)
def get_assignment(assignment_id: str, ctx: ClassworkContext = Depends(get_context)):
    assignment = ctx.assignments.get_assignment_by_id(assignment_id)
    if not assignment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return assignment


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: str, ctx: ClassworkContext = Depends(get_context)):
    ctx.assignments.delete_assignment(assignment_id)


# --- Submissions ---

@router.get("/{assignment_id}/submissions", response_model=List[AssignmentSubmissionRead])
def list_submissions(assignment_id: str, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignment_submissions.get_submissions_by_assignment(assignment_id)


@router.get("/{assignment_id}/submissions/{student_id}", response_model=AssignmentSubmissionRead)
def get_submission(assignment_id: str, student_id: str, ctx: ClassworkContext = Depends(get_context)):
    submission = ctx.assignment_submissions.get_submission(assignment_id, student_id)
    if not submission:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return submission


@router.put("/{assignment_id}/submissions/{student_id}", response_model=AssignmentSubmissionRead)
def save_submission(
    assignment_id: str,
    student_id: str,
    payload: StudentAssignmentSubmission,
    ctx: ClassworkContext = Depends(get_context),
):
    data = AssignmentSubmissionData(
        assignment_id=assignment_id, student_id=student_id, **payload.model_dump(exclude_unset=True)
    )
    return ctx.assignment_submissions.save_submission(data)


@router.post("/submissions/{submission_id}/to-review", response_model=AssignmentSubmissionRead)
def mark_to_review(submission_id: str, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignment_submissions.mark_as_to_review(submission_id)


@router.post("/submissions/{submission_id}/review", response_model=AssignmentSubmissionRead)
def review_submission(submission_id: str, review: ReviewRequest, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignment_submissions.mark_as_reviewed(
        submission_id,
        teacher_comments=review.teacher_comments,
        grade=review.grade,
        graded_by_id=review.graded_by_id,
    )


@router.post("/submissions/{submission_id}/return", response_model=AssignmentSubmissionRead)
def return_submission(submission_id: str, review: ReviewRequest, ctx: ClassworkContext = Depends(get_context)):
    return ctx.assignment_submissions.return_submission(submission_id, teacher_comments=review.teacher_comments)
