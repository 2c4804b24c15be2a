from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from src.classwork.context import ClassworkContext
from src.classwork.models.enums import StreamItemType
from src.classwork.schemas.grade import GradeRead, StudentGradeItem
from src.classwork.schemas.material import MaterialData, MaterialRead, MaterialSummary
from src.classwork.schemas.stream import StreamItemData, StreamItemRead
from src.classwork.utils.dependencies import get_context

router = APIRouter(tags=["Stream"])


# --- Stream Items ---

@router.post("/items", response_model=StreamItemRead)
def save_stream_item(data: StreamItemData, ctx: ClassworkContext = Depends(get_context)):
    return ctx.stream.save_stream_item(data)


@router.get("/items", response_model=List[StreamItemRead])
def list_stream_items(
    class_id: Optional[str] = None,
    include_archived: bool = False,
    ctx: ClassworkContext = Depends(get_context),
):
    return ctx.stream.load_stream_items(class_id=class_id, include_archived=include_archived)


@router.get("/items/archived", response_model=List[StreamItemRead])
def list_archived_items(type: Optional[StreamItemType] = None, ctx: ClassworkContext = Depends(get_context)):
    return ctx.stream.load_archived_stream_items(type)


@router.get("/items/{stream_item_id}", response_model=StreamItemRead)
def get_stream_item(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    item = ctx.stream.get_stream_item_detail(stream_item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Stream item not found")
    return item


@router.post("/items/{stream_item_id}/archive", response_model=StreamItemRead)
def archive_stream_item(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    ctx.stream.archive_stream_item(stream_item_id)
    return ctx.stream.get_stream_item_detail(stream_item_id)


@router.post("/items/{stream_item_id}/unarchive", response_model=StreamItemRead)
def unarchive_stream_item(stream_item_id: str, class_name: Optional[str] = None, ctx: ClassworkContext = Depends(get_context)):
    ctx.stream.unarchive_stream_item(stream_item_id, class_name)
    return ctx.stream.get_stream_item_detail(stream_item_id)


@router.delete("/items/{stream_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stream_item(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    ctx.stream.delete_stream_item(stream_item_id)


# --- Materials ---

@router.post("/materials", response_model=MaterialRead)
def save_material(data: MaterialData, ctx: ClassworkContext = Depends(get_context)):
    ctx.materials.save_material(data)
    return ctx.materials.get_material_by_stream_item_id(data.stream_item_id)


@router.get("/materials", response_model=List[MaterialSummary])
def list_materials(include_archived: bool = False, ctx: ClassworkContext = Depends(get_context)):
    return ctx.materials.get_all_materials(include_archived=include_archived)


@router.get("/materials/class/{class_id}", response_model=List[MaterialSummary])
def list_class_materials(class_id: str, include_archived: bool = False, ctx: ClassworkContext = Depends(get_context)):
    return ctx.materials.get_materials_by_class(class_id, include_archived=include_archived)


@router.get("/materials/student/{student_id}", response_model=List[MaterialSummary])
def list_student_materials(student_id: str, group: Optional[str] = None, ctx: ClassworkContext = Depends(get_context)):
    return ctx.materials.get_materials_for_student(student_id, group)


@router.get("/materials/stream-item/{stream_item_id}", response_model=MaterialRead)
def get_material(stream_item_id: str, ctx: ClassworkContext = Depends(get_context)):
    material = ctx.materials.get_material_by_stream_item_id(stream_item_id)
    if not material:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found")
    return material


# --- Grades ---

@router.get("/classes/{class_id}/grades", response_model=List[GradeRead])
def list_grades(class_id: str, student_id: Optional[str] = None, ctx: ClassworkContext = Depends(get_context)):
    return ctx.grades.get_grades(class_id, student_id)


@router.get("/classes/{class_id}/grades/{student_id}", response_model=List[StudentGradeItem])
def student_gradebook(class_id: str, student_id: str, ctx: ClassworkContext = Depends(get_context)):
    return ctx.grades.get_student_grades(class_id, student_id)
