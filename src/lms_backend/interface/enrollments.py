from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session
from lms_backend.interface.base import EntityInterface, ListQuery
from lms_backend.model.enrollment import Enrollment

# status is checked by the storage layer so that every invalid value surfaces
# as the same constraint violation
class EnrollmentCreate(BaseModel):
    user_id: UUID
    course_id: UUID
    status: str = "active"

class EnrollmentGet(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    status: str
    enrolled_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    model_config = ConfigDict(from_attributes=True)

class EnrollmentList(EnrollmentGet):
    pass

class EnrollmentUpdate(BaseModel):
    status: Optional[str] = None

class EnrollmentQuery(ListQuery):
    user_id: Optional[UUID] = None
    course_id: Optional[UUID] = None
    status: Optional[str] = None

def enrollment_search(db: Session, query, params: Optional[EnrollmentQuery]):
    if params.user_id is not None:
        query = query.filter(Enrollment.user_id == params.user_id)
    if params.course_id is not None:
        query = query.filter(Enrollment.course_id == params.course_id)
    if params.status is not None:
        query = query.filter(Enrollment.status == params.status)

    return query.order_by(Enrollment.enrolled_at.desc())

class EnrollmentInterface(EntityInterface):
    create = EnrollmentCreate
    get = EnrollmentGet
    list = EnrollmentList
    update = EnrollmentUpdate
    query = EnrollmentQuery
    search = enrollment_search
    endpoint = "enrollments"
    model = Enrollment
