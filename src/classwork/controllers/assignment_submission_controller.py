# File: src/classwork/controllers/assignment_submission_controller.py
from typing import List, Optional

from src.classwork.controllers.submission_controller import SubmissionController
from src.classwork.controllers.submission_lifecycle import SubmissionLifecycle
from src.classwork.models.assignment import Assignment, AssignmentSubmission
from src.classwork.models.enums import SubmissionStatus
from src.classwork.schemas.submission import AssignmentSubmissionData, AssignmentSubmissionRead


class AssignmentSubmissionController(SubmissionController):
    model = AssignmentSubmission
    parent_model = Assignment
    parent_field = "assignment_id"
    read_schema = AssignmentSubmissionRead
    lifecycle = SubmissionLifecycle(allow_return=True)

    def save_submission(self, data: AssignmentSubmissionData) -> AssignmentSubmissionRead:
        return self._read(self._save(data))

    def get_submission(self, assignment_id: str, student_id: str) -> Optional[AssignmentSubmissionRead]:
        submission = self._find(assignment_id, student_id)
        return self._read(submission) if submission else None

    def get_submissions_by_assignment(self, assignment_id: str) -> List[AssignmentSubmissionRead]:
        return self._list_by_parent(assignment_id)

    def mark_as_to_review(self, submission_id: str) -> AssignmentSubmissionRead:
        return self._read(self._mark_as_to_review(submission_id))

    def mark_as_reviewed(
        self,
        submission_id: str,
        teacher_comments: Optional[str] = None,
        grade: Optional[float] = None,
        graded_by_id: Optional[str] = None,
    ) -> AssignmentSubmissionRead:
        return self._read(self._mark_as_reviewed(submission_id, teacher_comments, grade, graded_by_id))

    def return_submission(self, submission_id: str, teacher_comments: Optional[str] = None) -> AssignmentSubmissionRead:
        """Send the work back to the student for corrections."""
        changes = {"teacher_comments": teacher_comments} if teacher_comments is not None else None
        return self._read(self._move(submission_id, SubmissionStatus.RETURNED, changes))
