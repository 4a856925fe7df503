from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from lms_backend.interface.base import EntityInterface, ListQuery
from lms_backend.model.enrollment import CourseReview

# rating range is enforced by the storage layer check constraint
class CourseReviewCreate(BaseModel):
    course_id: UUID
    rating: int
    review_text: Optional[str] = Field(None, max_length=16384)
    user_id: Optional[UUID] = Field(None, description="Author, defaults to the caller")

class CourseReviewGet(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    rating: int
    review_text: Optional[str] = None
    is_approved: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CourseReviewList(CourseReviewGet):
    pass

class CourseReviewUpdate(BaseModel):
    rating: Optional[int] = None
    review_text: Optional[str] = Field(None, max_length=16384)

class CourseReviewApproval(BaseModel):
    is_approved: bool

class CourseReviewQuery(ListQuery):
    course_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    is_approved: Optional[bool] = None

def course_review_search(db: Session, query, params: Optional[CourseReviewQuery]):
    if params.course_id is not None:
        query = query.filter(CourseReview.course_id == params.course_id)
    if params.user_id is not None:
        query = query.filter(CourseReview.user_id == params.user_id)
    if params.is_approved is not None:
        query = query.filter(CourseReview.is_approved == params.is_approved)

    return query.order_by(CourseReview.created_at.desc())

class CourseReviewInterface(EntityInterface):
    create = CourseReviewCreate
    get = CourseReviewGet
    list = CourseReviewList
    update = CourseReviewUpdate
    query = CourseReviewQuery
    search = course_review_search
    endpoint = "course-reviews"
    model = CourseReview
    owner_column = "user_id"
