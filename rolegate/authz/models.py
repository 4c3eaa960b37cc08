"""RBAC data models.

* :class:`RoleDefinition` — what a role grants and where it may be assigned.
* :class:`RoleAssignment` — a role definition granted at a scope.
* :class:`AuthorizationDecision` — outcome of a single access check.

All three are frozen dataclasses, so instances can be shared freely
between concurrent callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from rolegate.authz.validators import validate_role_definition_components


@dataclass(frozen=True)
class RoleDefinition:
    """A validated role definition.

    Attributes
    ----------
    id:
        Unique identifier, compared case-insensitively by providers.
    display_name:
        Human-readable name.  Opaque to the engine.
    assignable_scopes:
        Rooted scopes this role may be assigned at (at least one).
    permissions:
        Permission patterns this role grants (at least one).

    Validation runs in ``__post_init__``; an invalid definition raises
    :class:`~rolegate.errors.ArgumentOutOfRangeError` and is never
    constructed.
    """

    id: str
    display_name: str
    assignable_scopes: Tuple[str, ...]
    permissions: Tuple[str, ...]

    def __post_init__(self) -> None:
        # Materialize first: validation walks the collections, and the stored
        # values must stay immutable afterwards.
        for name in ("assignable_scopes", "permissions"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                object.__setattr__(self, name, tuple(value))
        validate_role_definition_components(self.id, self.assignable_scopes, self.permissions)


@dataclass(frozen=True)
class RoleAssignment:
    """A role definition granted at a scope.

    ``principal_id`` is only consulted by
    :class:`~rolegate.authz.providers.MemoryRoleAssignmentProvider`; the
    engine delegates principal resolution to the assignment provider.
    """

    id: str
    role_definition_id: str
    scope: str
    principal_id: Optional[str] = None


@dataclass(frozen=True)
class AuthorizationDecision:
    """Result of :meth:`AuthorizationEngine.check_access`.

    ``matched_assignments`` lists the assignments that granted access, in
    the order the assignment provider yielded them.  It is empty when
    access is denied.
    """

    granted: bool
    matched_assignments: Tuple[RoleAssignment, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matched_assignments", tuple(self.matched_assignments))


# Shared denial; carries no per-call state.
ACCESS_DENIED = AuthorizationDecision(granted=False, matched_assignments=())
