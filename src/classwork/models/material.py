from typing import List, Optional

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field

from src.classwork.models.base import NaiveUtcModel, TimestampedModel, new_id


class Material(TimestampedModel, table=True):
    __tablename__ = "materials"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    stream_item_id: str = Field(foreign_key="stream_items.id", unique=True)
    description: Optional[str] = None
    assign_to_all: bool = Field(default=True)
    assigned_groups: List[str] = Field(default_factory=list, sa_type=JSON)


class MaterialStudent(NaiveUtcModel, table=True):
    __tablename__ = "material_students"
    __table_args__ = (UniqueConstraint("material_id", "student_id"), {"extend_existing": True})

    id: str = Field(default_factory=new_id, primary_key=True)
    material_id: str = Field(foreign_key="materials.id", index=True)
    student_id: str = Field(foreign_key="users.id", index=True)
    source_group: Optional[str] = None
