# File: src/classwork/controllers/user_controller.py
import logging
from typing import List, Optional, Union

from src.classwork.db.base import Backend
from src.classwork.models.enums import UserRole
from src.classwork.models.user import User
from src.classwork.schemas.common import AuthorRead, StudentRead
from src.classwork.schemas.user import UserCreate
from src.classwork.utils.time import utc_now


class UserController:
    """Read-mostly user directory used for authors, groups and student lookups."""

    def __init__(self, backend: Backend):
        self.backend = backend

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self.backend.get(User, user_id)

    def save_user(self, data: Union[UserCreate, User]) -> User:
        payload = data.model_dump(exclude={"created_at", "updated_at"}, exclude_none=False)
        if isinstance(payload.get("role"), UserRole):
            payload["role"] = payload["role"].value
        existing = self.get_user(payload.get("id"))
        if existing:
            for field, value in payload.items():
                setattr(existing, field, value)
            existing.updated_at = utc_now()
            user = existing
        else:
            if not payload.get("id"):
                payload.pop("id", None)
            user = User(**payload)
        saved = self.backend.save(user)
        logging.info(f"User saved: {saved.id} ({saved.email})")
        return saved

    def get_all_students(self) -> List[User]:
        students = self.backend.list(User, role=UserRole.STUDENT, is_active=True)
        return sorted(students, key=lambda u: (u.last_name.lower(), u.first_name.lower(), u.id))

    def get_students_by_group(self, group: str) -> List[User]:
        if not group:
            return []
        students = self.backend.list(User, role=UserRole.STUDENT, is_active=True, assigned_group=group)
        return sorted(students, key=lambda u: (u.last_name.lower(), u.first_name.lower(), u.id))

    def get_available_groups(self) -> List[str]:
        return sorted({s.assigned_group for s in self.get_all_students() if s.assigned_group})

    def get_teachers(self) -> List[User]:
        teachers = self.backend.list(User, role=[UserRole.TEACHER, UserRole.ADMIN], is_active=True)
        return sorted(teachers, key=lambda u: (u.last_name.lower(), u.first_name.lower(), u.id))

    def group_of(self, student_id: str) -> Optional[str]:
        user = self.get_user(student_id)
        return user.assigned_group if user else None

    def author(self, user_id: Optional[str]) -> AuthorRead:
        user = self.get_user(user_id)
        if not user:
            return AuthorRead(id=user_id or "", name="Usuario")
        return AuthorRead(id=user.id, name=user.display_name, avatar=user.avatar)

    def student(self, user_id: str) -> StudentRead:
        user = self.get_user(user_id)
        if not user:
            return StudentRead(id=user_id, name="Usuario")
        return StudentRead(id=user.id, name=user.display_name, avatar=user.avatar, group=user.assigned_group)
