from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session
from lms_backend.interface.base import EntityInterface, ListQuery
from lms_backend.model.role import AppRole, UserRole

class UserRoleCreate(BaseModel):
    user_id: UUID
    role: AppRole

class UserRoleGet(BaseModel):
    id: UUID
    user_id: UUID
    role: AppRole

    model_config = ConfigDict(from_attributes=True)

class UserRoleList(UserRoleGet):
    pass

class UserRoleQuery(ListQuery):
    user_id: Optional[UUID] = None
    role: Optional[AppRole] = None

def user_role_search(db: Session, query, params: Optional[UserRoleQuery]):
    if params.user_id is not None:
        query = query.filter(UserRole.user_id == params.user_id)
    if params.role is not None:
        query = query.filter(UserRole.role == params.role)

    return query.order_by(UserRole.user_id, UserRole.role)

class UserRoleInterface(EntityInterface):
    create = UserRoleCreate
    get = UserRoleGet
    list = UserRoleList
    query = UserRoleQuery
    search = user_role_search
    endpoint = "user-roles"
    model = UserRole
