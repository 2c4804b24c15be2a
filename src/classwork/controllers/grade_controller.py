# File: src/classwork/controllers/grade_controller.py
import logging
from typing import List, Optional, Union

from src.classwork.controllers.assignment_scope import is_visible, linked_parents
from src.classwork.db.base import Backend
from src.classwork.models.assignment import Assignment, AssignmentStudent, AssignmentSubmission
from src.classwork.models.grade import Grade
from src.classwork.models.quiz import Quiz, QuizStudent, QuizSubmission
from src.classwork.models.stream import StreamItem
from src.classwork.schemas.grade import GradeRead, StudentGradeItem
from src.classwork.utils.time import utc_now

DEFAULT_MAX_POINTS = 100.0


class GradeController:
    def __init__(self, backend: Backend, users):
        self.backend = backend
        self.users = users

    def record_grade(
        self,
        parent: Union[Quiz, Assignment],
        submission: Union[QuizSubmission, AssignmentSubmission],
        graded_by_id: Optional[str] = None,
    ) -> Grade:
        """Create or update the grade row mirroring a reviewed submission."""
        key = {"quiz_id": parent.id} if isinstance(parent, Quiz) else {"assignment_id": parent.id}
        grade = self.backend.find_one(Grade, student_id=submission.student_id, **key)
        if grade is None:
            grade = Grade(student_id=submission.student_id, **key)
        item = self.backend.get(StreamItem, parent.stream_item_id)
        max_points = parent.points or DEFAULT_MAX_POINTS

        grade.class_id = item.class_id if item else None
        grade.points_earned = submission.grade
        grade.max_points = max_points
        grade.percentage = round(submission.grade / max_points * 100, 2)
        grade.status = submission.status
        grade.feedback = submission.teacher_comments
        grade.submitted_at = submission.submitted_at
        grade.graded_at = submission.graded_at or utc_now()
        grade.graded_by_id = graded_by_id or grade.graded_by_id
        grade.updated_at = utc_now()
        saved = self.backend.save(grade)
        logging.info(f"Grade recorded for student {saved.student_id}: {saved.points_earned}/{saved.max_points}")
        return saved

    def get_grades(self, class_id: str, student_id: Optional[str] = None) -> List[GradeRead]:
        criteria = {"class_id": class_id}
        if student_id:
            criteria["student_id"] = student_id
        grades = self.backend.list(Grade, **criteria)
        grades.sort(key=lambda g: (g.graded_at or g.created_at, g.id), reverse=True)
        return [GradeRead.model_validate(g) for g in grades]

    def get_student_grades(self, class_id: str, student_id: str) -> List[StudentGradeItem]:
        """
        Gradebook of one student in one class: every assignment (not deleted)
        and quiz the student can see or has already submitted to.
        """
        items = {
            item.id: item
            for item in self.backend.list(
                StreamItem, class_id=class_id, type=["assignment", "quiz"], is_deleted=False
            )
        }
        if not items:
            return []
        group = self.users.group_of(student_id)
        grade_items = []

        assignments = self.backend.list(Assignment, stream_item_id=list(items), is_deleted=False)
        submissions = {
            s.assignment_id: s for s in self.backend.list(AssignmentSubmission, student_id=student_id)
        }
        linked = linked_parents(self.backend, AssignmentStudent, "assignment_id", student_id)
        for assignment in assignments:
            submission = submissions.get(assignment.id)
            if submission or is_visible(assignment, linked, group):
                grade_items.append(self._grade_item(assignment, "assignment", items[assignment.stream_item_id], submission))

        quizzes = self.backend.list(Quiz, stream_item_id=list(items))
        submissions = {s.quiz_id: s for s in self.backend.list(QuizSubmission, student_id=student_id)}
        linked = linked_parents(self.backend, QuizStudent, "quiz_id", student_id)
        for quiz in quizzes:
            submission = submissions.get(quiz.id)
            if submission or is_visible(quiz, linked, group):
                grade_items.append(self._grade_item(quiz, "quiz", items[quiz.stream_item_id], submission))

        grade_items.sort(key=lambda g: (g.due_date is None, g.due_date, g.title, g.id))
        return grade_items

    def _grade_item(self, work, kind: str, item: StreamItem, submission) -> StudentGradeItem:
        return StudentGradeItem(
            id=work.id,
            type=kind,
            title=item.title or f"Untitled {kind.capitalize()}",
            max_points=work.points or DEFAULT_MAX_POINTS,
            points_earned=submission.grade if submission else None,
            status=submission.status if submission else "pending",
            due_date=work.due_date,
            submitted_at=submission.submitted_at if submission else None,
            feedback=submission.teacher_comments if submission else None,
        )
