# File: src/classwork/controllers/stream_controller.py
import logging
from typing import List, Optional, Sequence

from src.classwork.controllers.assigned_work import newest_first
from src.classwork.db.base import Backend, ChildReplacement
from src.classwork.exceptions import NotFound
from src.classwork.models.classroom import Classroom
from src.classwork.models.enums import StreamItemType
from src.classwork.models.stream import Attachment, StreamItem
from src.classwork.schemas.stream import AttachmentData, AttachmentRead, StreamItemData, StreamItemRead
from src.classwork.utils.time import utc_now

NO_CLASS = "Sin clase"
RESTORED_CLASS = "Clase Restaurada"


def attachment_rows(stream_item_id: str, attachments: Sequence[AttachmentData]) -> List[Attachment]:
    return [
        Attachment(stream_item_id=stream_item_id, order=position, **attachment.model_dump())
        for position, attachment in enumerate(attachments)
    ]


class StreamController:
    """Stream items are the anchor every quiz, assignment and material hangs from."""

    def __init__(self, backend: Backend, users, classes):
        self.backend = backend
        self.users = users
        self.classes = classes

    def get_stream_item(self, stream_item_id: str) -> Optional[StreamItem]:
        item = self.backend.get(StreamItem, stream_item_id)
        if item is None or item.is_deleted:
            return None
        return item

    def get_stream_item_detail(self, stream_item_id: str) -> Optional[StreamItemRead]:
        item = self.get_stream_item(stream_item_id)
        return self._read(item) if item else None

    def require_stream_item(self, stream_item_id: str) -> StreamItem:
        item = self.get_stream_item(stream_item_id)
        if item is None:
            logging.warning(f"Stream item not found: {stream_item_id}")
            raise NotFound(f"Stream item {stream_item_id} not found")
        return item

    def class_name_of(self, item: StreamItem) -> str:
        classroom = self.classes.get_class(item.class_id)
        if classroom:
            return classroom.title
        return item.class_name or NO_CLASS

    def save_stream_item(self, data: StreamItemData) -> StreamItemRead:
        fields = data.model_dump(exclude={"id", "attachments"})
        fields["type"] = data.type.value
        item = self.get_stream_item(data.id) if data.id else None
        if item is None:
            item = StreamItem(**({"id": data.id} if data.id else {}), **fields)
        else:
            for field, value in fields.items():
                setattr(item, field, value)
            item.updated_at = utc_now()
        classroom = self.classes.get_class(item.class_id)
        if classroom:
            item.class_name = classroom.title

        if data.attachments is None:
            saved = self.backend.save(item)
        else:
            saved = self.backend.replace_children(
                item,
                ChildReplacement(Attachment, {"stream_item_id": item.id}, attachment_rows(item.id, data.attachments)),
            )
        logging.info(f"Stream item saved: {saved.id} ({saved.type})")
        return self._read(saved)

    def save_attachments(self, stream_item_id: str, attachments: Sequence[AttachmentData]) -> List[AttachmentRead]:
        item = self.require_stream_item(stream_item_id)
        self.backend.replace_children(
            item,
            ChildReplacement(Attachment, {"stream_item_id": item.id}, attachment_rows(item.id, attachments)),
        )
        return self.get_attachments(stream_item_id)

    def get_attachments(self, stream_item_id: str) -> List[AttachmentRead]:
        rows = sorted(self.backend.list(Attachment, stream_item_id=stream_item_id), key=lambda a: (a.order, a.id))
        return [AttachmentRead.model_validate(row) for row in rows]

    def _read(self, item: StreamItem) -> StreamItemRead:
        return StreamItemRead(
            id=item.id,
            class_id=item.class_id,
            class_name=self.class_name_of(item),
            type=item.type,
            title=item.title,
            content=item.content,
            topic_id=item.topic_id,
            is_archived=item.is_archived,
            created_at=item.created_at,
            updated_at=item.updated_at,
            author=self.users.author(item.author_id),
            attachments=self.get_attachments(item.id),
        )

    def load_stream_items(self, class_id: Optional[str] = None, include_archived: bool = False) -> List[StreamItemRead]:
        """Items of one class, or of every class when class_id is None."""
        criteria = {"is_deleted": False}
        if not include_archived:
            criteria["is_archived"] = False
        if class_id is not None:
            criteria["class_id"] = class_id
        items = self.backend.list(StreamItem, **criteria)
        return newest_first(self._read(item) for item in items)

    def load_archived_stream_items(self, type: Optional[StreamItemType] = None) -> List[StreamItemRead]:
        criteria = {"is_archived": True, "is_deleted": False}
        if type is not None:
            criteria["type"] = type
        items = self.backend.list(StreamItem, **criteria)
        return newest_first(self._read(item) for item in items)

    def archive_stream_item(self, stream_item_id: str) -> StreamItem:
        item = self.require_stream_item(stream_item_id)
        item.is_archived = True
        item.updated_at = utc_now()
        logging.info(f"Stream item archived: {stream_item_id}")
        return self.backend.save(item)

    def unarchive_stream_item(self, stream_item_id: str, class_name: Optional[str] = None) -> StreamItem:
        """
        Bring an item back to the active stream. Its class is restored when
        archived, and recreated under the remembered name when it is gone.
        """
        item = self.require_stream_item(stream_item_id)
        if item.class_id:
            classroom = self.classes.get_class(item.class_id)
            if classroom is None:
                title = class_name.strip() if class_name and class_name.strip() not in ("", NO_CLASS) else None
                self.backend.save(Classroom(
                    id=item.class_id,
                    title=title or item.class_name or RESTORED_CLASS,
                    description="Class recreated when restoring an archived item",
                    teacher_id=item.author_id,
                ))
                logging.info(f"Recreated missing class {item.class_id} for stream item {stream_item_id}")
            elif classroom.is_archived:
                self.classes.unarchive_class(classroom.id)
        item.is_archived = False
        item.updated_at = utc_now()
        logging.info(f"Stream item restored: {stream_item_id}")
        return self.backend.save(item)

    def delete_stream_item(self, stream_item_id: str) -> None:
        """Flag the item deleted; its quiz, assignment or material rows keep pointing at it."""
        item = self.require_stream_item(stream_item_id)
        self.backend.delete_where(Attachment, stream_item_id=stream_item_id)
        item.is_deleted = True
        item.deleted_at = utc_now()
        item.updated_at = item.deleted_at
        self.backend.save(item)
        logging.info(f"Stream item deleted: {stream_item_id}")
