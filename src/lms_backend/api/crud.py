import logging
from uuid import UUID
from typing import Any
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import exc
from lms_backend.api.exceptions import NotFoundException
from lms_backend.errors import ConstraintViolation
from lms_backend.permissions.core import check_permissions, check_write, row_state
from lms_backend.permissions.principal import Principal
from lms_backend.interface.base import EntityInterface, ListQuery

logger = logging.getLogger(__name__)


def _not_found(db_type: Any) -> NotFoundException:
    # same message the AuthorizationDenied handler produces
    return NotFoundException(detail=f"{db_type.__name__} not found")


async def create_db(permissions: Principal, db: Session, entity: BaseModel, interface: EntityInterface):

    db_type = interface.model

    if isinstance(entity, BaseModel):
        model_dump = entity.model_dump(exclude_unset=True)
    else:
        model_dump = dict(entity or {})

    owner_column = interface.owner_column
    if owner_column is not None and model_dump.get(owner_column) is None and permissions.user_id is not None:
        model_dump[owner_column] = permissions.user_id

    # new-row check runs before anything is written
    check_write(permissions, db_type, "create", model_dump, db)

    try:
        db_item = db_type(**model_dump)

        db.add(db_item)
        db.commit()
        db.refresh(db_item)
    except exc.IntegrityError as e:
        db.rollback()
        raise ConstraintViolation.from_integrity_error(db_type.__name__, e)
    except exc.SQLAlchemyError:
        db.rollback()
        logger.exception("Creating %s failed", db_type.__tablename__)
        raise

    return interface.get.model_validate(db_item, from_attributes=True)


async def get_id_db(permissions: Principal, db: Session, id: UUID | str, interface: EntityInterface, scope: str = "get"):

    db_type = interface.model

    query = check_permissions(permissions, db_type, scope, db)

    item = query.filter(db_type.id == id).first()

    if item is None:
        raise _not_found(db_type)

    return interface.get.model_validate(item, from_attributes=True)


async def list_db(permissions: Principal, db: Session, params: ListQuery, interface: EntityInterface):

    db_type = interface.model

    query = check_permissions(permissions, db_type, "list", db)

    if interface.search is not None:
        query = interface.search(db, query, params)

    total = query.order_by(None).count()

    if params.limit is not None:
        query = query.limit(params.limit)
    if params.skip is not None:
        query = query.offset(params.skip)

    query_result = [interface.list.model_validate(entity, from_attributes=True) for entity in query.all()]

    return query_result, total


def update_db(permissions: Principal, db: Session, id: UUID | str | None, entity: Any, interface: EntityInterface, db_item=None):
    """
    Update a row through the policy engine.

    The existing row must pass the ``update`` visibility predicate, the merged
    row state must pass the new-row check. Either denial looks like a missing row.
    """
    db_type = interface.model

    if db_item is None:
        query = check_permissions(permissions, db_type, "update", db)

        db_item = query.filter(db_type.id == id).first()

        if db_item is None:
            raise _not_found(db_type)

    if isinstance(entity, BaseModel):
        entity = entity.model_dump(exclude_unset=True)

    previous = row_state(db_item)
    check_write(permissions, db_type, "update", {**previous, **entity}, db, previous)

    try:
        for key, attr in entity.items():
            setattr(db_item, key, attr)

        db.commit()
        db.refresh(db_item)
    except exc.IntegrityError as e:
        db.rollback()
        raise ConstraintViolation.from_integrity_error(db_type.__name__, e)
    except exc.SQLAlchemyError:
        db.rollback()
        logger.exception("Updating %s failed", db_type.__tablename__)
        raise

    return interface.get.model_validate(db_item, from_attributes=True)


def delete_db(permissions: Principal, db: Session, id: UUID | str, db_type: Any):

    query = check_permissions(permissions, db_type, "delete", db)

    entity = query.filter(db_type.id == id).first()

    if not entity:
        raise _not_found(db_type)

    try:
        db.delete(entity)
        db.commit()
    except exc.IntegrityError as e:
        db.rollback()
        raise ConstraintViolation.from_integrity_error(db_type.__name__, e)
    except exc.SQLAlchemyError:
        db.rollback()
        logger.exception("Deleting %s failed", db_type.__tablename__)
        raise
