# File: src/classwork/controllers/quiz_submission_controller.py
from typing import List, Optional

from src.classwork.controllers.submission_controller import SubmissionController
from src.classwork.controllers.submission_lifecycle import SubmissionLifecycle
from src.classwork.models.quiz import Quiz, QuizSubmission
from src.classwork.schemas.submission import QuizSubmissionData, QuizSubmissionRead


class QuizSubmissionController(SubmissionController):
    model = QuizSubmission
    parent_model = Quiz
    parent_field = "quiz_id"
    read_schema = QuizSubmissionRead
    lifecycle = SubmissionLifecycle(allow_return=False)

    def save_quiz_submission(self, data: QuizSubmissionData) -> QuizSubmissionRead:
        """Upsert the student's single submission for the quiz."""
        return self._read(self._save(data))

    def get_quiz_submission(self, quiz_id: str, student_id: str) -> Optional[QuizSubmissionRead]:
        submission = self._find(quiz_id, student_id)
        return self._read(submission) if submission else None

    def get_quiz_submissions_by_quiz(self, quiz_id: str) -> List[QuizSubmissionRead]:
        return self._list_by_parent(quiz_id)

    def mark_as_to_review(self, submission_id: str) -> QuizSubmissionRead:
        return self._read(self._mark_as_to_review(submission_id))

    def mark_as_reviewed(
        self,
        submission_id: str,
        teacher_comments: Optional[str] = None,
        grade: Optional[float] = None,
        graded_by_id: Optional[str] = None,
    ) -> QuizSubmissionRead:
        return self._read(self._mark_as_reviewed(submission_id, teacher_comments, grade, graded_by_id))
