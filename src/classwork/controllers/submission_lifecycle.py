# File: src/classwork/controllers/submission_lifecycle.py
#
# Status workflow shared by quiz and assignment submissions:
#
#   (new) -> draft -> submitted / to_review -> reviewed (graded)
#
# Timestamps only ever move forward: once set they are never cleared, and
# submitted_at keeps the first submission time.
from datetime import datetime
from typing import Any, Dict, Optional, Union

from sqlmodel import SQLModel

from src.classwork.exceptions import InvalidTransition, ValidationFailed
from src.classwork.models.enums import SubmissionStatus as S
from src.classwork.utils.time import utc_now

SUBMITTED_STATES = frozenset({S.SUBMITTED, S.TO_REVIEW})
REVIEWED_STATES = frozenset({S.REVIEWED, S.GRADED})
PENDING_REVIEW_STATES = SUBMITTED_STATES

_TRANSITIONS = {
    None: {S.DRAFT, S.SUBMITTED, S.TO_REVIEW},
    S.DRAFT: {S.DRAFT, S.SUBMITTED, S.TO_REVIEW},
    S.SUBMITTED: {S.DRAFT, S.SUBMITTED, S.TO_REVIEW, S.REVIEWED, S.GRADED, S.RETURNED},
    S.TO_REVIEW: {S.DRAFT, S.SUBMITTED, S.TO_REVIEW, S.REVIEWED, S.GRADED, S.RETURNED},
    S.REVIEWED: {S.REVIEWED, S.GRADED, S.RETURNED},
    S.GRADED: {S.REVIEWED, S.GRADED, S.RETURNED},
    S.RETURNED: {S.RETURNED, S.DRAFT, S.SUBMITTED, S.TO_REVIEW},
}


def _later(current: Optional[datetime], candidate: datetime) -> datetime:
    return candidate if current is None or candidate > current else current


class SubmissionLifecycle:
    """
    Applies status changes to a submission row. `allow_return` enables the
    assignment-only "returned for corrections" state.
    """

    def __init__(self, allow_return: bool = False):
        self.allow_return = allow_return

    def coerce(self, status: Union[str, S, None]) -> Optional[S]:
        if status is None:
            return None
        try:
            value = S(status)
        except ValueError:
            raise ValidationFailed(f"Unknown submission status '{status}'") from None
        if value == S.RETURNED and not self.allow_return:
            raise ValidationFailed("Only assignment submissions can be returned")
        return value

    def can_move(self, current: Optional[S], target: S) -> bool:
        if target == S.RETURNED and not self.allow_return:
            return False
        return target in _TRANSITIONS[current]

    def check(self, current: Optional[S], target: S) -> None:
        if not self.can_move(current, target):
            raise InvalidTransition(current.value if current else None, target.value)

    def apply(
        self,
        submission: SQLModel,
        target: Union[str, S, None] = None,
        changes: Optional[Dict[str, Any]] = None,
        *,
        new: bool = False,
        review: bool = False,
        now: Optional[datetime] = None,
    ) -> SQLModel:
        """
        Move `submission` to `target` (None keeps the current status) and
        copy `changes` onto it. `new=True` means the row is not stored yet,
        so the move starts from "no row". `review=True` marks an explicit
        teacher review, which refreshes reviewed_at even when the status
        does not change.
        """
        now = now or utc_now()
        current = None if new else self.coerce(submission.status)
        target = self.coerce(target) or current or S.DRAFT
        self.check(current, target)

        changes = dict(changes or {})
        grade = changes.get("grade", getattr(submission, "grade", None))
        if target == S.GRADED and grade is None:
            raise ValidationFailed("A graded submission needs a grade")

        previous_grade = getattr(submission, "grade", None)
        for field, value in changes.items():
            setattr(submission, field, value)

        if target in SUBMITTED_STATES and submission.submitted_at is None:
            submission.submitted_at = now
        if target in REVIEWED_STATES:
            if submission.submitted_at is None:
                submission.submitted_at = now
            if review or current not in REVIEWED_STATES:
                submission.reviewed_at = _later(submission.reviewed_at, now)
        if target == S.RETURNED and current != S.RETURNED:
            submission.returned_at = _later(submission.returned_at, now)
        if submission.grade is not None and submission.grade != previous_grade:
            submission.graded_at = _later(submission.graded_at, now)

        submission.status = target.value
        if current is None:
            submission.created_at = now
        submission.updated_at = now
        return submission

