# File: src/classwork/controllers/assignment_controller.py
import logging
from typing import List, Optional

from src.classwork.controllers.assigned_work import AssignedWorkController, newest_first
from src.classwork.controllers.submission_lifecycle import PENDING_REVIEW_STATES
from src.classwork.exceptions import NotFound
from src.classwork.models.assignment import Assignment, AssignmentStudent, AssignmentSubmission
from src.classwork.models.enums import StreamItemType
from src.classwork.models.stream import StreamItem
from src.classwork.schemas.assignment import AssignmentData, AssignmentRead, AssignmentSummary
from src.classwork.utils.time import utc_now


class AssignmentController(AssignedWorkController):
    model = Assignment
    link_model = AssignmentStudent
    link_field = "assignment_id"
    item_type = StreamItemType.ASSIGNMENT.value

    def save_assignment(self, data: AssignmentData) -> Assignment:
        assignment = self._upsert(
            data.stream_item_id,
            data.model_dump(include={
                "points", "due_date", "due_time", "instructions", "assign_to_all", "assigned_groups",
            }),
        )
        saved = self.backend.replace_children(
            assignment,
            self._student_replacement(assignment, data.assigned_groups, data.selected_students),
        )
        logging.info(f"Assignment {saved.id} saved for stream item {saved.stream_item_id}")
        return saved

    def _read(self, assignment: Assignment) -> AssignmentRead:
        item = self.stream.get_stream_item(assignment.stream_item_id)
        return AssignmentRead(
            id=assignment.id,
            stream_item_id=assignment.stream_item_id,
            points=assignment.points,
            due_date=assignment.due_date,
            due_time=assignment.due_time,
            instructions=assignment.instructions,
            assign_to_all=assignment.assign_to_all,
            assigned_groups=assignment.assigned_groups or [],
            selected_students=self._selected_students(assignment),
            is_archived=bool(item and item.is_archived),
            is_deleted=assignment.is_deleted,
        )

    def get_assignment_by_stream_item_id(self, stream_item_id: str) -> Optional[AssignmentRead]:
        assignment = self._by_stream_item(stream_item_id)
        if assignment is None or assignment.is_deleted:
            return None
        return self._read(assignment)

    def get_assignment_by_id(self, assignment_id: str) -> Optional[AssignmentRead]:
        assignment = self.backend.get(Assignment, assignment_id)
        if assignment is None or assignment.is_deleted:
            logging.warning(f"Assignment not found: {assignment_id}")
            return None
        return self._read(assignment)

    def _summary(self, assignment: Assignment, item: StreamItem) -> AssignmentSummary:
        return AssignmentSummary(
            id=assignment.id,
            stream_item_id=assignment.stream_item_id,
            class_id=item.class_id,
            class_name=self.stream.class_name_of(item),
            title=item.title,
            instructions=assignment.instructions,
            points=assignment.points,
            due_date=assignment.due_date,
            due_time=assignment.due_time,
            assign_to_all=assignment.assign_to_all,
            assigned_groups=assignment.assigned_groups or [],
            is_archived=item.is_archived,
            created_at=item.created_at,
            author=self.users.author(item.author_id),
            student_count=self._student_count(assignment),
            pending_review_count=self.backend.count(
                AssignmentSubmission, assignment_id=assignment.id, status=list(PENDING_REVIEW_STATES)
            ),
        )

    def get_all_assignments(self, include_archived: bool = False) -> List[AssignmentSummary]:
        pairs = self._pairs(self.backend.list(Assignment, is_deleted=False), include_archived)
        return newest_first(self._summary(a, item) for a, item in pairs)

    def get_assignments_by_class(self, class_id: str, include_archived: bool = False) -> List[AssignmentSummary]:
        assignments, items = self._records_for_class(class_id, is_deleted=False)
        pairs = self._pairs(assignments, include_archived, items)
        return newest_first(self._summary(a, item) for a, item in pairs)

    def get_assignments_for_student(self, student_id: str, group: Optional[str] = None) -> List[AssignmentSummary]:
        return self._visible_to(student_id, group, self.get_all_assignments())

    def get_archived_assignments(self) -> List[AssignmentSummary]:
        pairs = self._pairs(self.backend.list(Assignment, is_deleted=False), include_archived=True)
        return newest_first(self._summary(a, item) for a, item in pairs if item.is_archived)

    def delete_assignment(self, assignment_id: str) -> Assignment:
        """Soft delete: the row and its submissions stay, listings skip it."""
        assignment = self.backend.get(Assignment, assignment_id)
        if assignment is None:
            raise NotFound(f"Assignment {assignment_id} not found")
        now = utc_now()
        assignment.is_deleted = True
        assignment.deleted_at = now
        assignment.updated_at = now
        logging.info(f"Assignment {assignment_id} deleted")
        return self.backend.save(assignment)

    def archive_assignment(self, stream_item_id: str) -> StreamItem:
        return self.stream.archive_stream_item(stream_item_id)

    def unarchive_assignment(self, stream_item_id: str, class_name: Optional[str] = None) -> StreamItem:
        return self.stream.unarchive_stream_item(stream_item_id, class_name)
