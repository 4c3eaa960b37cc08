"""Role-based authorization — matchers, models, providers and engine."""

from rolegate.authz.engine import AuthorizationEngine, allow_all
from rolegate.authz.models import (
    ACCESS_DENIED,
    AuthorizationDecision,
    RoleAssignment,
    RoleDefinition,
)
from rolegate.authz.permissions import is_match
from rolegate.authz.providers import (
    MemoryRoleAssignmentProvider,
    MemoryRoleDefinitionProvider,
    RoleAssignmentProvider,
    RoleDefinitionProvider,
)
from rolegate.authz.scopes import is_prefix_match, is_prefix_match_any

__all__ = [
    "ACCESS_DENIED",
    "AuthorizationDecision",
    "AuthorizationEngine",
    "MemoryRoleAssignmentProvider",
    "MemoryRoleDefinitionProvider",
    "RoleAssignment",
    "RoleAssignmentProvider",
    "RoleDefinition",
    "RoleDefinitionProvider",
    "allow_all",
    "is_match",
    "is_prefix_match",
    "is_prefix_match_any",
]
