from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from src.classwork.models.base import NaiveUtcModel, TimestampedModel, new_id
from src.classwork.utils.time import utc_now


class Classroom(TimestampedModel, table=True):
    __tablename__ = "classes"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str
    description: Optional[str] = None
    subject: Optional[str] = None
    section: Optional[str] = None
    room: Optional[str] = None
    class_code: Optional[str] = None
    teacher_id: Optional[str] = Field(default=None, foreign_key="users.id")
    is_archived: bool = Field(default=False)
    status: str = Field(default="active")


class ClassMember(NaiveUtcModel, table=True):
    __tablename__ = "class_members"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    class_id: str = Field(foreign_key="classes.id", index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    role: str = Field(default="student")
    status: str = Field(default="active")
    joined_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)


class Topic(TimestampedModel, table=True):
    __tablename__ = "topics"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    class_id: str = Field(foreign_key="classes.id", index=True)
    name: str
    description: Optional[str] = None
    order: int = Field(default=0)
