from typing import Optional

from sqlmodel import Field

from src.classwork.models.base import TimestampedModel, new_id
from src.classwork.models.enums import UserRole


class User(TimestampedModel, table=True):
    __tablename__ = "users"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True)
    first_name: str = ""
    last_name: str = ""
    role: str = Field(default=UserRole.STUDENT.value, index=True)  # student, teacher, admin, parent
    avatar: Optional[str] = None
    assigned_group: Optional[str] = Field(default=None, index=True)
    is_active: bool = Field(default=True)

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or "Usuario"
