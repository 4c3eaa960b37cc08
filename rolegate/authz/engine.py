"""Authorization engine.

Decides whether an identity holds a permission at a resource scope by
walking the identity's role assignments.  An assignment grants access
when:

1. its scope is a prefix of the requested resource,
2. its role definition resolves and may be assigned at that scope,
3. one of the definition's permission patterns matches the permission,
4. the caller's ``check_callback`` (if any) agrees.

Usage::

    engine = AuthorizationEngine(assignment_provider, definition_provider)
    decision = engine.check_access(identity, "/Daycare/LittleBee", "Bubble/burst")
    if decision.granted:
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List

from rolegate.authz.models import ACCESS_DENIED, AuthorizationDecision, RoleAssignment
from rolegate.authz.permissions import is_match
from rolegate.authz.providers import (
    MemoryRoleAssignmentProvider,
    MemoryRoleDefinitionProvider,
    RoleAssignmentProvider,
    RoleDefinitionProvider,
)
from rolegate.authz.scopes import is_prefix_match, is_prefix_match_any
from rolegate.authz.validators import validate_permission, validate_scope
from rolegate.errors import ArgumentNullError

logger = logging.getLogger(__name__)

CheckCallback = Callable[[Any, RoleAssignment, Any], bool]


def allow_all(identity: Any, role_assignment: RoleAssignment, role_definition: Any) -> bool:
    """Default ``check_callback``: accept every candidate assignment."""
    return True


class AuthorizationEngine:
    """Evaluates role assignments against a requested permission.

    Parameters
    ----------
    role_assignment_provider:
        Resolves the assignments held by an identity.
    role_definition_provider:
        Resolves role definition ids.

    The engine holds no mutable state; both providers are fixed at
    construction.
    """

    def __init__(
        self,
        role_assignment_provider: RoleAssignmentProvider,
        role_definition_provider: RoleDefinitionProvider,
    ) -> None:
        if role_assignment_provider is None:
            raise ArgumentNullError("role_assignment_provider")
        if role_definition_provider is None:
            raise ArgumentNullError("role_definition_provider")

        self._assignment_provider = role_assignment_provider
        self._definition_provider = role_definition_provider

    @property
    def role_assignment_provider(self) -> RoleAssignmentProvider:
        return self._assignment_provider

    @property
    def role_definition_provider(self) -> RoleDefinitionProvider:
        return self._definition_provider

    def check_access(
        self,
        identity: Any,
        resource: str,
        permission: str,
        check_callback: CheckCallback = allow_all,
        evaluate_all: bool = True,
    ) -> AuthorizationDecision:
        """Check whether *identity* holds *permission* on *resource*.

        Args:
            identity: The requesting principal, passed through to the
                assignment provider and the callback.
            resource: Rooted scope being accessed.
            permission: Concrete (wildcard-free) permission.
            check_callback: ``(identity, assignment, definition) -> bool``
                run on every assignment that would grant access; returning
                ``False`` excludes that assignment.
            evaluate_all: When ``False``, stop at the first granting
                assignment.

        Returns:
            An :class:`AuthorizationDecision`.  Matched assignments keep the
            provider's iteration order.

        Raises:
            ArgumentNullError: *identity* or *check_callback* is None.
            ArgumentOutOfRangeError: *resource* or *permission* is malformed.
        """
        if identity is None:
            raise ArgumentNullError("identity")
        validate_scope(resource, "resource")
        validate_permission(permission, "permission")
        if check_callback is None:
            raise ArgumentNullError("check_callback")

        matches = self._collect_matches(
            identity, resource, permission, check_callback, stop_on_first=not evaluate_all
        )
        if not matches:
            logger.debug("Access denied: resource=%s, permission=%s", resource, permission)
            return ACCESS_DENIED

        logger.debug(
            "Access granted: resource=%s, permission=%s, assignments=%s",
            resource,
            permission,
            [a.id for a in matches],
        )
        return AuthorizationDecision(granted=True, matched_assignments=tuple(matches))

    def has_access(self, identity: Any, resource: str, permission: str) -> bool:
        """Boolean shortcut for :meth:`check_access` (first match wins)."""
        return self.check_access(identity, resource, permission, evaluate_all=False).granted

    def _collect_matches(
        self,
        identity: Any,
        resource: str,
        permission: str,
        check_callback: CheckCallback,
        stop_on_first: bool,
    ) -> List[RoleAssignment]:
        matches: List[RoleAssignment] = []

        assignments = self._assignment_provider.get_role_assignments_by_identity(identity)
        if not assignments:
            return matches

        for assignment in assignments:
            if not is_prefix_match(assignment.scope, resource):
                continue

            definition = self._definition_provider.get_role_definition_by_id(
                assignment.role_definition_id
            )
            if definition is None:
                logger.debug(
                    "Skipping assignment %s: unknown role definition %s",
                    assignment.id,
                    assignment.role_definition_id,
                )
                continue

            if not is_prefix_match_any(definition.assignable_scopes, assignment.scope):
                logger.debug(
                    "Skipping assignment %s: role definition %s is not assignable at %s",
                    assignment.id,
                    definition.id,
                    assignment.scope,
                )
                continue

            if not any(is_match(pattern, permission) for pattern in definition.permissions):
                continue

            if not check_callback(identity, assignment, definition):
                logger.debug("Assignment %s rejected by check callback", assignment.id)
                continue

            matches.append(assignment)
            if stop_on_first:
                break

        return matches

    @classmethod
    def from_config(cls, config: Any) -> AuthorizationEngine:
        """Create from the ``authorization`` section of :class:`RoleGateConfig`.

        Builds in-memory providers from the configured role definitions
        and role assignments.
        """
        definitions = [d.to_role_definition() for d in config.role_definitions]
        assignments = [a.to_role_assignment() for a in config.role_assignments]
        engine = cls(
            MemoryRoleAssignmentProvider(assignments),
            MemoryRoleDefinitionProvider(definitions),
        )
        logger.info(
            "Authorization engine ready: %d role definition(s), %d role assignment(s)",
            len(definitions),
            len(assignments),
        )
        return engine
