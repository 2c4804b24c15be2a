from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from src.classwork.models.base import NaiveUtcModel, TimestampedModel, new_id
from src.classwork.models.enums import StreamItemType
from src.classwork.utils.time import utc_now


class StreamItem(TimestampedModel, table=True):
    """Anchor row for every assignment, quiz, material and announcement."""
    __tablename__ = "stream_items"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    class_id: Optional[str] = Field(default=None, foreign_key="classes.id", index=True)
    type: str = Field(default=StreamItemType.ANNOUNCEMENT.value)
    title: str = ""
    content: Optional[str] = None
    author_id: Optional[str] = Field(default=None, foreign_key="users.id")
    topic_id: Optional[str] = Field(default=None, foreign_key="topics.id")
    class_name: Optional[str] = None  # survives deletion of the class
    is_archived: bool = Field(default=False)
    is_deleted: bool = Field(default=False)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=DateTime)


class Attachment(NaiveUtcModel, table=True):
    __tablename__ = "attachments"
    __table_args__ = {"extend_existing": True}

    id: str = Field(default_factory=new_id, primary_key=True)
    stream_item_id: str = Field(foreign_key="stream_items.id", index=True)
    type: str = Field(default="file")
    name: str
    url: Optional[str] = None
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)
