from typing import Annotated
from uuid import UUID
from fastapi import Depends, Response, status
from sqlalchemy.orm import Session

from lms_backend.api.api_builder import CrudRouter
from lms_backend.database import get_db
from lms_backend.interface.course_structure import CourseDraft, CourseStructureGet
from lms_backend.interface.courses import CourseInterface
from lms_backend.permissions.auth import get_current_principal
from lms_backend.permissions.principal import Principal
from lms_backend.services.course_authoring import delete_course, load_course_structure, save_course


class CourseRouter(CrudRouter):
    """Course CRUD whose delete goes through the authoring service"""

    def delete(self):
        def route(permissions: Annotated[Principal, Depends(get_current_principal)], id: UUID, db: Session = Depends(get_db)):
            delete_course(permissions, db, id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return route


course_router = CourseRouter(CourseInterface)

@course_router.router.post("/structure", response_model=CourseStructureGet, status_code=status.HTTP_201_CREATED)
def create_course_structure(permissions: Annotated[Principal, Depends(get_current_principal)], draft: CourseDraft, db: Session = Depends(get_db)):
    """Create a course together with its modules and lessons"""
    return save_course(permissions, db, draft)

@course_router.router.get("/{course_id}/structure", response_model=CourseStructureGet)
def get_course_structure(permissions: Annotated[Principal, Depends(get_current_principal)], course_id: UUID, db: Session = Depends(get_db)):
    return load_course_structure(permissions, db, course_id)

@course_router.router.put("/{course_id}/structure", response_model=CourseStructureGet)
def replace_course_structure(permissions: Annotated[Principal, Depends(get_current_principal)], course_id: UUID, draft: CourseDraft, db: Session = Depends(get_db)):
    """Replace course fields and its whole module/lesson structure"""
    return save_course(permissions, db, draft, course_id)
