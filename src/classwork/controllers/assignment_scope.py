# File: src/classwork/controllers/assignment_scope.py
#
# Who a quiz, assignment or material is meant for. Three ways in:
# assign_to_all, a student row stored at save time, or the student's
# current group being listed in assigned_groups.
from typing import Iterable, List, Optional, Set, Tuple, Type

from sqlmodel import SQLModel

Target = Tuple[str, Optional[str]]  # (student_id, source_group)


def resolve_targets(users, assign_to_all: bool, groups: Iterable[str], selected: Iterable[str]) -> List[Target]:
    """
    Expand groups to their current members and merge them with the
    individually selected ids. A student picked individually keeps a null
    source_group even when one of the groups also contains them.
    """
    if assign_to_all:
        return []
    targets = {}
    for student_id in selected:
        if student_id:
            targets[student_id] = None
    for group in groups:
        for student in users.get_students_by_group(group):
            targets.setdefault(student.id, group)
    return list(targets.items())


def student_rows(model: Type[SQLModel], parent_field: str, parent_id: str, targets: List[Target]) -> List[SQLModel]:
    return [
        model(**{parent_field: parent_id, "student_id": student_id, "source_group": group})
        for student_id, group in targets
    ]


def selected_students(rows: Iterable[SQLModel]) -> List[str]:
    return [row.student_id for row in rows if row.source_group is None]


def linked_parents(backend, model: Type[SQLModel], parent_field: str, student_id: str) -> Set[str]:
    """Parent ids with a stored row for the student, group-expanded or not."""
    rows = backend.list(model, student_id=student_id)
    return {getattr(row, parent_field) for row in rows}


def is_visible(record: SQLModel, linked: Set[str], group: Optional[str]) -> bool:
    if record.assign_to_all:
        return True
    if record.id in linked:
        return True
    return bool(group) and group in (record.assigned_groups or [])
