"""
Policy engine for the course platform.

Main components:
- principal: the acting principal of a request
- roles: privileged role-store lookups (has_role), exempt from policy evaluation
- handlers: base permission handler interface and registry
- handlers_impl: one handler per protected entity, one predicate per action
- core: registration and the check_permissions / check_write entry points
- auth: identity provider token verification and Principal creation
"""

from .principal import (
    Principal,
    anonymous_principal,
)

from .roles import (
    has_role,
    has_role_clause,
    get_roles,
)

from .core import (
    check_permissions,
    check_write,
    row_state,
    initialize_permission_handlers,
)

from .handlers import (
    PermissionHandler,
    PermissionRegistry,
    permission_registry,
)

__all__ = [
    # Principal
    "Principal",
    "anonymous_principal",

    # Role store
    "has_role",
    "has_role_clause",
    "get_roles",

    # Core permission functions
    "check_permissions",
    "check_write",
    "row_state",

    # Handlers
    "PermissionHandler",
    "PermissionRegistry",
    "permission_registry",

    # Initialization
    "initialize_permission_handlers",
]
