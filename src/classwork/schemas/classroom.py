from typing import Optional

from pydantic import BaseModel


class ClassCreate(BaseModel):
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    section: Optional[str] = None
    room: Optional[str] = None
    class_code: Optional[str] = None
    teacher_id: Optional[str] = None


class ClassUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subject: Optional[str] = None
    section: Optional[str] = None
    room: Optional[str] = None
    teacher_id: Optional[str] = None
