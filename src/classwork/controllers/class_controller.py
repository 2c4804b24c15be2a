# File: src/classwork/controllers/class_controller.py
import logging
from typing import List, Optional

from src.classwork.db.base import Backend
from src.classwork.exceptions import NotFound
from src.classwork.models.classroom import ClassMember, Classroom
from src.classwork.models.enums import UserRole
from src.classwork.models.user import User
from src.classwork.schemas.classroom import ClassCreate, ClassUpdate
from src.classwork.utils.time import utc_now


class ClassController:
    def __init__(self, backend: Backend):
        self.backend = backend

    def get_class(self, class_id: Optional[str]) -> Optional[Classroom]:
        if not class_id:
            return None
        return self.backend.get(Classroom, class_id)

    def require_class(self, class_id: str) -> Classroom:
        classroom = self.get_class(class_id)
        if classroom is None:
            logging.warning(f"Class not found: {class_id}")
            raise NotFound(f"Class {class_id} not found")
        return classroom

    def save_class(self, data: ClassCreate, class_id: Optional[str] = None) -> Classroom:
        if class_id:
            classroom = self.require_class(class_id)
            changes = data.model_dump(exclude_unset=True) if isinstance(data, ClassUpdate) else data.model_dump()
            for field, value in changes.items():
                setattr(classroom, field, value)
            classroom.updated_at = utc_now()
        else:
            classroom = Classroom(**data.model_dump())
        saved = self.backend.save(classroom)
        logging.info(f"Class saved: {saved.id} ({saved.title})")
        return saved

    def list_classes(self, include_archived: bool = False) -> List[Classroom]:
        criteria = {} if include_archived else {"is_archived": False}
        classes = self.backend.list(Classroom, **criteria)
        return sorted(classes, key=lambda c: (c.created_at, c.id), reverse=True)

    def _set_archived(self, class_id: str, archived: bool) -> Classroom:
        classroom = self.require_class(class_id)
        classroom.is_archived = archived
        classroom.status = "archived" if archived else "active"
        classroom.updated_at = utc_now()
        logging.info(f"Class {class_id} {'archived' if archived else 'restored'}")
        return self.backend.save(classroom)

    def archive_class(self, class_id: str) -> Classroom:
        return self._set_archived(class_id, True)

    def unarchive_class(self, class_id: str) -> Classroom:
        return self._set_archived(class_id, False)

    def add_member(self, class_id: str, user_id: str, role: str = UserRole.STUDENT.value) -> ClassMember:
        self.require_class(class_id)
        existing = self.backend.find_one(ClassMember, class_id=class_id, user_id=user_id)
        if existing:
            return existing
        member = self.backend.save(ClassMember(class_id=class_id, user_id=user_id, role=role))
        logging.info(f"User {user_id} joined class {class_id} as {role}")
        return member

    def get_class_students(self, class_id: str) -> List[User]:
        members = self.backend.list(ClassMember, class_id=class_id, role=UserRole.STUDENT, status="active")
        if not members:
            return []
        students = self.backend.list(User, id=[m.user_id for m in members])
        return sorted(students, key=lambda u: (u.last_name.lower(), u.first_name.lower(), u.id))
