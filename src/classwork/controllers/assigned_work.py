# File: src/classwork/controllers/assigned_work.py
#
# Shared plumbing for the three kinds of classwork that hang off a stream
# item and target students: quizzes, assignments and materials.
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from sqlmodel import SQLModel

from src.classwork.controllers.assignment_scope import (
    is_visible,
    linked_parents,
    resolve_targets,
    selected_students,
    student_rows,
)
from src.classwork.db.base import Backend, ChildReplacement
from src.classwork.models.stream import StreamItem
from src.classwork.utils.time import utc_now


def newest_first(rows: Iterable[Any]) -> List[Any]:
    return sorted(rows, key=lambda row: (row.created_at, row.id), reverse=True)


class AssignedWorkController:
    model: Type[SQLModel]
    link_model: Type[SQLModel]
    link_field: str
    item_type: str

    def __init__(self, backend: Backend, users, stream):
        self.backend = backend
        self.users = users
        self.stream = stream

    # ─── Saving ───────────────────────────────────────────────────

    def _upsert(self, stream_item_id: str, fields: Dict[str, Any]) -> SQLModel:
        """Existing row for the stream item with `fields` applied, or a new one."""
        self.stream.require_stream_item(stream_item_id)
        record = self.backend.find_one(self.model, stream_item_id=stream_item_id)
        if record is None:
            record = self.model(stream_item_id=stream_item_id)
            logging.info(f"Creating {self.item_type} for stream item {stream_item_id}")
        else:
            logging.info(f"Updating {self.item_type} {record.id} for stream item {stream_item_id}")
        for field, value in fields.items():
            setattr(record, field, value)
        record.updated_at = utc_now()
        return record

    def _student_replacement(self, record: SQLModel, groups: Sequence[str], selected: Sequence[str]) -> ChildReplacement:
        targets = resolve_targets(self.users, record.assign_to_all, groups, selected)
        rows = student_rows(self.link_model, self.link_field, record.id, targets)
        return ChildReplacement(self.link_model, {self.link_field: record.id}, rows)

    # ─── Reading ──────────────────────────────────────────────────

    def _by_stream_item(self, stream_item_id: str) -> Optional[SQLModel]:
        return self.backend.find_one(self.model, stream_item_id=stream_item_id)

    def _selected_students(self, record: SQLModel) -> List[str]:
        rows = self.backend.list(self.link_model, **{self.link_field: record.id})
        return sorted(selected_students(rows))

    def _student_count(self, record: SQLModel) -> int:
        return self.backend.count(self.link_model, **{self.link_field: record.id})

    def _pairs(self, records: List[SQLModel], include_archived: bool, items: Optional[List[StreamItem]] = None):
        """(record, stream item) pairs with a live stream item, archived ones optionally dropped."""
        if items is None:
            items = self.backend.list(StreamItem, id=[r.stream_item_id for r in records]) if records else []
        by_id = {item.id: item for item in items}
        pairs = []
        for record in records:
            item = by_id.get(record.stream_item_id)
            if item is None or item.is_deleted:
                continue
            if item.is_archived and not include_archived:
                continue
            pairs.append((record, item))
        return pairs

    def _records_for_class(self, class_id: str, **criteria):
        items = self.backend.list(StreamItem, class_id=class_id, type=self.item_type, is_deleted=False)
        if not items:
            return [], []
        records = self.backend.list(self.model, stream_item_id=[item.id for item in items], **criteria)
        return records, items

    def _visible_to(self, student_id: str, group: Optional[str], summaries: List[Any]) -> List[Any]:
        if group is None:
            group = self.users.group_of(student_id)
        linked = linked_parents(self.backend, self.link_model, self.link_field, student_id)
        seen = set()
        visible = []
        for summary in summaries:
            if summary.is_archived or summary.id in seen:
                continue
            if is_visible(summary, linked, group):
                seen.add(summary.id)
                visible.append(summary)
        return visible
