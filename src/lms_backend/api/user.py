from typing import Annotated, List, Optional
from uuid import UUID
from fastapi import Depends
from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy.orm import Session

from lms_backend.api.crud import update_db
from lms_backend.api.exceptions import NotFoundException, UnauthorizedException
from lms_backend.database import get_db
from lms_backend.interface.profiles import ProfileGet, ProfileInterface, ProfileUpdate
from lms_backend.permissions.auth import get_current_principal
from lms_backend.permissions.core import check_permissions
from lms_backend.permissions.principal import Principal
from lms_backend.permissions.roles import get_roles
from lms_backend.model.auth import Profile

user_router = APIRouter()

class CurrentUserGet(BaseModel):
    id: UUID
    email: Optional[str] = None
    roles: List[str] = []
    profile: Optional[ProfileGet] = None

def _own_profile(permissions: Principal, db: Session, action: str) -> Optional[Profile]:
    query = check_permissions(permissions, Profile, action, db)
    return query.filter(Profile.user_id == permissions.user_id).first()

@user_router.get("", response_model=CurrentUserGet)
def get_current_user(
    permissions: Annotated[Principal, Depends(get_current_principal)],
    db: Session = Depends(get_db)
):
    """Get the current authenticated principal with roles and profile"""
    if not permissions.is_authenticated:
        raise UnauthorizedException()

    profile = _own_profile(permissions, db, "get")

    return CurrentUserGet(
        id=permissions.user_id,
        email=permissions.email,
        roles=get_roles(db, permissions.user_id),
        profile=ProfileGet.model_validate(profile) if profile is not None else None
    )

@user_router.patch("/profile", response_model=ProfileGet)
def update_current_user_profile(
    permissions: Annotated[Principal, Depends(get_current_principal)],
    entity: ProfileUpdate,
    db: Session = Depends(get_db)
):
    if not permissions.is_authenticated:
        raise UnauthorizedException()

    profile = _own_profile(permissions, db, "update")

    if profile is None:
        raise NotFoundException(detail=f"{Profile.__name__} not found")

    return update_db(permissions, db, None, entity, ProfileInterface, profile)
