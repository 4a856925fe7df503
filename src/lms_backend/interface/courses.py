from decimal import Decimal
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from lms_backend.interface.base import BaseEntityGet, EntityInterface, ListQuery
from lms_backend.model.course import Course

class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=1024)
    thumbnail_url: Optional[str] = Field(None, max_length=2048)
    price: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2, description="Shown struck through next to the price")
    is_published: bool = False

class CourseGet(BaseEntityGet):
    id: UUID
    title: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    is_published: bool
    created_by: Optional[UUID] = None

    model_config = ConfigDict(from_attributes=True)

class CourseList(BaseModel):
    id: UUID
    title: str
    slug: str
    short_description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    is_published: bool

    model_config = ConfigDict(from_attributes=True)

class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=1024)
    thumbnail_url: Optional[str] = Field(None, max_length=2048)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_published: Optional[bool] = None

class CourseQuery(ListQuery):
    slug: Optional[str] = None
    title: Optional[str] = None
    is_published: Optional[bool] = None

def course_search(db: Session, query, params: Optional[CourseQuery]):
    if params.slug is not None:
        query = query.filter(Course.slug == params.slug)
    if params.title is not None:
        query = query.filter(Course.title.ilike(f"%{params.title}%"))
    if params.is_published is not None:
        query = query.filter(Course.is_published == params.is_published)

    # newest first, as listed in the authoring screen
    return query.order_by(Course.created_at.desc(), Course.title)

class CourseInterface(EntityInterface):
    create = CourseCreate
    get = CourseGet
    list = CourseList
    update = CourseUpdate
    query = CourseQuery
    search = course_search
    endpoint = "courses"
    model = Course
    owner_column = "created_by"
