from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from lms_backend.interface.base import EntityInterface, ListQuery
from lms_backend.model.course import CourseModule

class CourseModuleCreate(BaseModel):
    course_id: UUID
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    sort_order: int = Field(0, ge=0)

class CourseModuleGet(BaseModel):
    id: UUID
    course_id: UUID
    title: str
    description: Optional[str] = None
    sort_order: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CourseModuleList(CourseModuleGet):
    pass

class CourseModuleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    sort_order: Optional[int] = Field(None, ge=0)

class CourseModuleQuery(ListQuery):
    course_id: Optional[UUID] = None

def course_module_search(db: Session, query, params: Optional[CourseModuleQuery]):
    if params.course_id is not None:
        query = query.filter(CourseModule.course_id == params.course_id)

    return query.order_by(CourseModule.course_id, CourseModule.sort_order)

class CourseModuleInterface(EntityInterface):
    create = CourseModuleCreate
    get = CourseModuleGet
    list = CourseModuleList
    update = CourseModuleUpdate
    query = CourseModuleQuery
    search = course_module_search
    endpoint = "course-modules"
    model = CourseModule
