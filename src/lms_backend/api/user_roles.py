from typing import Annotated
from uuid import UUID
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from sqlalchemy import exc

from lms_backend.api.crud import create_db, list_db
from lms_backend.api.exceptions import NotFoundException
from lms_backend.permissions.auth import get_current_principal
from lms_backend.permissions.core import check_permissions
from lms_backend.permissions.principal import Principal
from lms_backend.database import get_db
from lms_backend.interface.user_roles import UserRoleCreate, UserRoleGet, UserRoleInterface, UserRoleList, UserRoleQuery
from lms_backend.model.role import AppRole, UserRole

user_roles_router = APIRouter()

@user_roles_router.get("", response_model=list[UserRoleList])
async def list_user_roles(
    permissions: Annotated[Principal, Depends(get_current_principal)],
    response: Response,
    db: Session = Depends(get_db),
    params: UserRoleQuery = Depends()
):
    """List role grants visible to the caller"""

    list_result, total = await list_db(permissions, db, params, UserRoleInterface)
    response.headers["X-Total-Count"] = str(total)

    return list_result

@user_roles_router.get("/users/{user_id}/roles/{role}", response_model=UserRoleGet)
def get_user_role(
    permissions: Annotated[Principal, Depends(get_current_principal)],
    user_id: UUID,
    role: AppRole,
    db: Session = Depends(get_db)
):
    query = check_permissions(permissions, UserRole, "get", db)
    entity = query.filter(UserRole.user_id == user_id, UserRole.role == role).first()

    if not entity:
        raise NotFoundException(detail=f"{UserRole.__name__} not found")

    return UserRoleGet.model_validate(entity)

@user_roles_router.post("", response_model=UserRoleGet, status_code=status.HTTP_201_CREATED)
async def create_user_role(permissions: Annotated[Principal, Depends(get_current_principal)], entity: UserRoleCreate, db: Session = Depends(get_db)):
    return await create_db(permissions, db, entity, UserRoleInterface)

@user_roles_router.delete("/users/{user_id}/roles/{role}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_role(permissions: Annotated[Principal, Depends(get_current_principal)], user_id: UUID, role: AppRole, db: Session = Depends(get_db)):

    query = check_permissions(permissions, UserRole, "delete", db)

    entity = query.filter(UserRole.user_id == user_id, UserRole.role == role).first()

    if not entity:
        raise NotFoundException(detail=f"{UserRole.__name__} not found")

    try:
        db.delete(entity)
        db.commit()
    except exc.SQLAlchemyError:
        db.rollback()
        raise

    return Response(status_code=status.HTTP_204_NO_CONTENT)
