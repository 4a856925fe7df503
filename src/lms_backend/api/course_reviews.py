from typing import Annotated
from uuid import UUID
from fastapi import Depends
from sqlalchemy.orm import Session

from lms_backend.api.api_builder import CrudRouter
from lms_backend.api.crud import update_db
from lms_backend.database import get_db
from lms_backend.interface.course_reviews import CourseReviewApproval, CourseReviewGet, CourseReviewInterface
from lms_backend.permissions.auth import get_current_principal
from lms_backend.permissions.principal import Principal

course_review_router = CrudRouter(CourseReviewInterface)

@course_review_router.router.patch("/{id}/approval", response_model=CourseReviewGet)
def set_course_review_approval(permissions: Annotated[Principal, Depends(get_current_principal)], id: UUID, entity: CourseReviewApproval, db: Session = Depends(get_db)):
    """Moderate a review; only admins pass the new-row check for is_approved"""
    return update_db(permissions, db, id, entity, CourseReviewInterface)
