from typing import Optional

from pydantic import BaseModel

from src.classwork.models.enums import UserRole


class UserCreate(BaseModel):
    id: Optional[str] = None
    email: str
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.STUDENT
    avatar: Optional[str] = None
    assigned_group: Optional[str] = None
    is_active: bool = True
