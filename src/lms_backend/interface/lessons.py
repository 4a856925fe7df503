from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from lms_backend.interface.base import EntityInterface, ListQuery
from lms_backend.model.course import Lesson

class LessonCreate(BaseModel):
    module_id: UUID
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=2048)
    duration_minutes: Optional[int] = Field(None, ge=0)
    sort_order: int = Field(0, ge=0)
    is_preview: bool = False

class LessonGet(BaseModel):
    id: UUID
    module_id: UUID
    title: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    duration_minutes: Optional[int] = None
    sort_order: int
    is_preview: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LessonList(LessonGet):
    pass

class LessonUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=2048)
    duration_minutes: Optional[int] = Field(None, ge=0)
    sort_order: Optional[int] = Field(None, ge=0)
    is_preview: Optional[bool] = None

class LessonQuery(ListQuery):
    module_id: Optional[UUID] = None
    is_preview: Optional[bool] = None

def lesson_search(db: Session, query, params: Optional[LessonQuery]):
    if params.module_id is not None:
        query = query.filter(Lesson.module_id == params.module_id)
    if params.is_preview is not None:
        query = query.filter(Lesson.is_preview == params.is_preview)

    return query.order_by(Lesson.module_id, Lesson.sort_order)

class LessonInterface(EntityInterface):
    create = LessonCreate
    get = LessonGet
    list = LessonList
    update = LessonUpdate
    query = LessonQuery
    search = lesson_search
    endpoint = "lessons"
    model = Lesson
