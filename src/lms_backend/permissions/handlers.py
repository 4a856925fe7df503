import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Type
from sqlalchemy import false
from sqlalchemy.orm import Session, Query
from sqlalchemy.sql.elements import ColumnElement

from lms_backend.errors import AuthorizationDenied
from lms_backend.model.role import AppRole
from lms_backend.permissions.principal import Principal
from lms_backend.permissions.roles import has_role, has_role_clause

logger = logging.getLogger(__name__)

READ_ACTIONS = ("get", "list")
WRITE_ACTIONS = ("create", "update")
ACTIONS = READ_ACTIONS + WRITE_ACTIONS + ("delete",)


class PermissionHandler(ABC):
    """
    Base class for entity-specific permission handlers.

    A handler owns one predicate per (entity, action): ``row_filter`` decides
    which existing rows an action may touch, ``can_write_row`` decides
    whether a new row state may be written. Both are pure reads.
    """

    def __init__(self, entity: Type[Any]):
        self.entity = entity
        self.resource_name = entity.__tablename__

    @abstractmethod
    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        """Visibility predicate for existing rows (get, list, update, delete)."""
        pass

    def can_write_row(self, principal: Principal, action: str, values: Mapping[str, Any], db: Session,
                      previous: Optional[Mapping[str, Any]] = None) -> bool:
        """
        New-row check for create and update. Admin-only unless overridden.

        ``values`` is the complete row state after the write, ``previous`` the
        state before it (None on create).
        """
        return self.check_admin(principal, db)

    def check_admin(self, principal: Principal, db: Session) -> bool:
        """Check if principal holds the admin role"""
        return has_role(db, principal.user_id, AppRole.admin)

    def admin_clause(self, principal: Principal) -> ColumnElement[bool]:
        return has_role_clause(principal.user_id, AppRole.admin)

    def owner_clause(self, principal: Principal, column) -> ColumnElement[bool]:
        if principal.user_id is None:
            return false()
        return column == principal.user_id

    def is_owner(self, principal: Principal, values: Mapping[str, Any]) -> bool:
        owner = values.get("user_id")
        if principal.user_id is None or owner is None:
            return False
        return str(owner) == str(principal.user_id)

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        """Build a query already restricted to the rows the action may touch"""
        return db.query(self.entity).filter(self.row_filter(principal, action, db))


class AdminOnlyPermissionHandler(PermissionHandler):
    """Fallback for entities without a dedicated handler"""

    def row_filter(self, principal: Principal, action: str, db: Session) -> ColumnElement[bool]:
        return self.admin_clause(principal)


class PermissionRegistry:
    """Registry for managing entity permission handlers"""

    _instance = None
    _handlers: Dict[Type[Any], PermissionHandler] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def register(self, entity: Type[Any], handler: PermissionHandler):
        """Register a permission handler for an entity"""
        self._handlers[entity] = handler

    def get_handler(self, entity: Type[Any]) -> Optional[PermissionHandler]:
        """Get the permission handler for an entity"""
        return self._handlers.get(entity)

    def resolve(self, entity: Type[Any]) -> PermissionHandler:
        handler = self.get_handler(entity)
        if handler is None:
            return AdminOnlyPermissionHandler(entity)
        return handler

    def check_permissions(self, principal: Principal, entity: Type[Any], action: str, db: Session) -> Query:
        """Check permissions and return filtered query"""
        if action not in ACTIONS:
            raise ValueError(f"Unknown action '{action}'")

        return self.resolve(entity).build_query(principal, action, db)

    def check_write(self, principal: Principal, entity: Type[Any], action: str, values: Mapping[str, Any], db: Session,
                    previous: Optional[Mapping[str, Any]] = None):
        """Raise AuthorizationDenied unless the new row state may be written"""
        if action not in WRITE_ACTIONS:
            raise ValueError(f"Action '{action}' has no new-row check")

        if not self.resolve(entity).can_write_row(principal, action, values, db, previous):
            logger.debug("Denied %s on %s", action, entity.__tablename__)
            raise AuthorizationDenied(entity.__name__, action)


# Global registry instance
permission_registry = PermissionRegistry()
