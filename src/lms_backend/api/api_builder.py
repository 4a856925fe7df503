from uuid import UUID
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, FastAPI, Response, status
from sqlalchemy.orm import Session
from lms_backend.api.crud import create_db, get_id_db, list_db, update_db, delete_db
from lms_backend.permissions.auth import get_current_principal
from lms_backend.permissions.principal import Principal
from lms_backend.database import get_db
from lms_backend.interface.base import EntityInterface


class CrudRouter:

    id_type = "id"

    path: str
    dto: EntityInterface

    def __init__(self, dto, endpoint: Optional[str] = None):
        self.dto = dto
        if endpoint is None:
            self.path = self.dto.endpoint
        else:
            self.path = endpoint

        self.router = APIRouter()

    def create(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_principal)], entity: self.dto.create, db: Session = Depends(get_db)) -> self.dto.get:
            return await create_db(permissions, db, entity, self.dto)
        return route

    def get(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_principal)], id: UUID, db: Session = Depends(get_db)) -> self.dto.get:
            return await get_id_db(permissions, db, id, self.dto)
        return route

    def list(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_principal)], response: Response, params: self.dto.query = Depends(), db: Session = Depends(get_db)) -> list[self.dto.list]:
            list_result, total = await list_db(permissions, db, params, self.dto)
            response.headers["X-Total-Count"] = str(total)
            return list_result
        return route

    def update(self):
        def route(permissions: Annotated[Principal, Depends(get_current_principal)], id: UUID, entity: self.dto.update, db: Session = Depends(get_db)) -> self.dto.get:
            return update_db(permissions, db, id, entity, self.dto)
        return route

    def delete(self):
        def route(permissions: Annotated[Principal, Depends(get_current_principal)], id: UUID, db: Session = Depends(get_db)):
            delete_db(permissions, db, id, self.dto.model)
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return route

    def register_routes(self, app: FastAPI):

        scope_name = self.path.replace("/", "").replace("-", " ")

        # static sub-routes added to self.router before this call take precedence over /{id}
        if self.dto.create is not None:
            self.router.add_api_route("", self.create(), methods=["POST"],
                        status_code=status.HTTP_201_CREATED, name=f"create {scope_name}")
        self.router.add_api_route(f"/{{{CrudRouter.id_type}}}", self.get(), methods=["GET"],
                    status_code=status.HTTP_200_OK, name=f"get {scope_name}")
        self.router.add_api_route("", self.list(), methods=["GET"],
                    status_code=status.HTTP_200_OK, name=f"list {scope_name}")
        if self.dto.update is not None:
            self.router.add_api_route(f"/{{{CrudRouter.id_type}}}", self.update(), methods=["PATCH"],
                        status_code=status.HTTP_200_OK, name=f"update {scope_name}")
        self.router.add_api_route(f"/{{{CrudRouter.id_type}}}", self.delete(), methods=["DELETE"],
                    status_code=status.HTTP_204_NO_CONTENT, name=f"delete {scope_name}")

        app.include_router(
            self.router,
            prefix=f"/{self.path}",
            tags=[scope_name]
        )

        return self
