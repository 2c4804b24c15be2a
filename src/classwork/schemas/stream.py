from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.classwork.models.enums import StreamItemType
from src.classwork.schemas.common import AuthorRead


class AttachmentData(BaseModel):
    type: str = "file"
    name: str
    url: Optional[str] = None
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None


class AttachmentRead(AttachmentData):
    id: str
    stream_item_id: str
    order: int

    class Config:
        from_attributes = True


class StreamItemData(BaseModel):
    id: Optional[str] = None
    class_id: Optional[str] = None
    type: StreamItemType = StreamItemType.ANNOUNCEMENT
    title: str = ""
    content: Optional[str] = None
    author_id: Optional[str] = None
    topic_id: Optional[str] = None
    attachments: Optional[List[AttachmentData]] = None


class StreamItemRead(BaseModel):
    id: str
    class_id: Optional[str] = None
    class_name: Optional[str] = None
    type: str
    title: str
    content: Optional[str] = None
    topic_id: Optional[str] = None
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime
    author: Optional[AuthorRead] = None
    attachments: List[AttachmentRead] = []
