# File: src/classwork/controllers/submission_controller.py
#
# Behaviour shared by quiz and assignment submissions: upsert keyed by
# (parent, student), status moves through SubmissionLifecycle, and a
# review that carries a grade is mirrored into the grades table.
import logging
from typing import List, Optional, Type

from pydantic import BaseModel
from sqlmodel import SQLModel

from src.classwork.controllers.submission_lifecycle import SubmissionLifecycle
from src.classwork.db.base import Backend
from src.classwork.exceptions import NotFound
from src.classwork.models.enums import SubmissionStatus

_IDENTITY_FIELDS = {"student_id", "status"}


class SubmissionController:
    model: Type[SQLModel]
    parent_model: Type[SQLModel]
    parent_field: str
    read_schema: Type[BaseModel]
    lifecycle: SubmissionLifecycle

    def __init__(self, backend: Backend, users, grades):
        self.backend = backend
        self.users = users
        self.grades = grades

    @property
    def kind(self) -> str:
        return self.parent_model.__name__.lower()

    def _require_parent(self, parent_id: str) -> SQLModel:
        parent = self.backend.get(self.parent_model, parent_id)
        if parent is None:
            logging.warning(f"{self.parent_model.__name__} not found: {parent_id}")
            raise NotFound(f"{self.parent_model.__name__} {parent_id} not found")
        return parent

    def _require_submission(self, submission_id: str) -> SQLModel:
        submission = self.backend.get(self.model, submission_id)
        if submission is None:
            logging.warning(f"{self.model.__name__} not found: {submission_id}")
            raise NotFound(f"Submission {submission_id} not found")
        return submission

    def _find(self, parent_id: str, student_id: str) -> Optional[SQLModel]:
        return self.backend.find_one(self.model, **{self.parent_field: parent_id, "student_id": student_id})

    def _read(self, submission: SQLModel) -> BaseModel:
        read = self.read_schema.model_validate(submission)
        read.student = self.users.student(submission.student_id)
        return read

    # ─── Writes ───────────────────────────────────────────────────

    def _save(self, data: BaseModel) -> SQLModel:
        parent_id = getattr(data, self.parent_field)
        self._require_parent(parent_id)
        existing = self._find(parent_id, data.student_id)
        submission = existing or self.model(**{self.parent_field: parent_id, "student_id": data.student_id})
        # Only what the caller actually sent overwrites stored fields.
        changes = data.model_dump(exclude_unset=True, exclude=_IDENTITY_FIELDS | {self.parent_field})
        self.lifecycle.apply(submission, data.status, changes, new=existing is None)
        saved = self.backend.save(submission)
        logging.info(
            f"{self.kind} submission {saved.id} saved for student {saved.student_id} with status {saved.status}"
        )
        return saved

    def _move(self, submission_id: str, target: SubmissionStatus, changes=None, review: bool = False) -> SQLModel:
        submission = self._require_submission(submission_id)
        self.lifecycle.apply(submission, target, changes, review=review)
        saved = self.backend.save(submission)
        logging.info(f"{self.kind} submission {submission_id} moved to {saved.status}")
        return saved

    def _mark_as_to_review(self, submission_id: str) -> SQLModel:
        return self._move(submission_id, SubmissionStatus.TO_REVIEW)

    def _mark_as_reviewed(
        self,
        submission_id: str,
        teacher_comments: Optional[str] = None,
        grade: Optional[float] = None,
        graded_by_id: Optional[str] = None,
    ) -> SQLModel:
        changes = {}
        if teacher_comments is not None:
            changes["teacher_comments"] = teacher_comments
        if grade is not None:
            changes["grade"] = grade
        saved = self._move(submission_id, SubmissionStatus.REVIEWED, changes, review=True)
        if saved.grade is not None:
            parent = self._require_parent(getattr(saved, self.parent_field))
            self.grades.record_grade(parent, saved, graded_by_id=graded_by_id)
        return saved

    # ─── Reads ────────────────────────────────────────────────────

    def _list_by_parent(self, parent_id: str) -> List[BaseModel]:
        rows = self.backend.list(self.model, **{self.parent_field: parent_id})
        submitted = sorted((r for r in rows if r.submitted_at), key=lambda r: (r.submitted_at, r.id), reverse=True)
        unsubmitted = sorted((r for r in rows if not r.submitted_at), key=lambda r: (r.created_at, r.id))
        return [self._read(row) for row in submitted + unsubmitted]
