from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.classwork.schemas.common import AuthorRead
from src.classwork.schemas.stream import AttachmentData, AttachmentRead


class MaterialData(BaseModel):
    stream_item_id: str
    description: Optional[str] = None
    assign_to_all: bool = True
    assigned_groups: List[str] = []
    selected_students: List[str] = []
    attachments: Optional[List[AttachmentData]] = None  # None leaves attachments as they are


class MaterialRead(BaseModel):
    id: str
    stream_item_id: str
    description: Optional[str] = None
    assign_to_all: bool
    assigned_groups: List[str] = []
    selected_students: List[str] = []
    attachments: List[AttachmentRead] = []
    is_archived: bool = False


class MaterialSummary(BaseModel):
    id: str
    stream_item_id: str
    type: str = "material"
    class_id: Optional[str] = None
    class_name: str
    title: str
    description: Optional[str] = None
    assign_to_all: bool
    assigned_groups: List[str] = []
    is_archived: bool = False
    created_at: datetime
    author: Optional[AuthorRead] = None
    student_count: int = 0
    attachment_count: int = 0
