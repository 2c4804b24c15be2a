# File: src/classwork/controllers/material_controller.py
import logging
from typing import List, Optional

from src.classwork.controllers.assigned_work import AssignedWorkController, newest_first
from src.classwork.controllers.stream_controller import attachment_rows
from src.classwork.db.base import ChildReplacement
from src.classwork.models.enums import StreamItemType
from src.classwork.models.material import Material, MaterialStudent
from src.classwork.models.stream import Attachment, StreamItem
from src.classwork.schemas.material import MaterialData, MaterialRead, MaterialSummary


class MaterialController(AssignedWorkController):
    model = Material
    link_model = MaterialStudent
    link_field = "material_id"
    item_type = StreamItemType.MATERIAL.value

    def save_material(self, data: MaterialData) -> Material:
        material = self._upsert(
            data.stream_item_id,
            data.model_dump(include={"description", "assign_to_all", "assigned_groups"}),
        )
        replacements = [self._student_replacement(material, data.assigned_groups, data.selected_students)]
        if data.attachments is not None:
            replacements.append(ChildReplacement(
                Attachment,
                {"stream_item_id": data.stream_item_id},
                attachment_rows(data.stream_item_id, data.attachments),
            ))
        saved = self.backend.replace_children(material, *replacements)
        logging.info(f"Material {saved.id} saved for stream item {saved.stream_item_id}")
        return saved

    def get_material_by_stream_item_id(self, stream_item_id: str) -> Optional[MaterialRead]:
        material = self._by_stream_item(stream_item_id)
        if material is None:
            return None
        item = self.stream.get_stream_item(stream_item_id)
        return MaterialRead(
            id=material.id,
            stream_item_id=material.stream_item_id,
            description=material.description,
            assign_to_all=material.assign_to_all,
            assigned_groups=material.assigned_groups or [],
            selected_students=self._selected_students(material),
            attachments=self.stream.get_attachments(stream_item_id),
            is_archived=bool(item and item.is_archived),
        )

    def _summary(self, material: Material, item: StreamItem) -> MaterialSummary:
        return MaterialSummary(
            id=material.id,
            stream_item_id=material.stream_item_id,
            class_id=item.class_id,
            class_name=self.stream.class_name_of(item),
            title=item.title,
            description=material.description,
            assign_to_all=material.assign_to_all,
            assigned_groups=material.assigned_groups or [],
            is_archived=item.is_archived,
            created_at=item.created_at,
            author=self.users.author(item.author_id),
            student_count=self._student_count(material),
            attachment_count=self.backend.count(Attachment, stream_item_id=item.id),
        )

    def get_all_materials(self, include_archived: bool = False) -> List[MaterialSummary]:
        pairs = self._pairs(self.backend.list(Material), include_archived)
        return newest_first(self._summary(m, item) for m, item in pairs)

    def get_materials_by_class(self, class_id: str, include_archived: bool = False) -> List[MaterialSummary]:
        materials, items = self._records_for_class(class_id)
        pairs = self._pairs(materials, include_archived, items)
        return newest_first(self._summary(m, item) for m, item in pairs)

    def get_materials_for_student(self, student_id: str, group: Optional[str] = None) -> List[MaterialSummary]:
        return self._visible_to(student_id, group, self.get_all_materials())
