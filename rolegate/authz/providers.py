"""Role assignment and role definition providers.

The engine consumes two pluggable lookups, each with a single query:

* :class:`RoleAssignmentProvider` — which assignments does an identity hold?
* :class:`RoleDefinitionProvider` — what does a role definition id resolve to?

The in-memory implementations below are the reference adapters; real
hosts back these with a database or directory service.  Implementations
must tolerate concurrent read-only calls.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from rolegate.authz.models import RoleAssignment, RoleDefinition
from rolegate.authz.permissions import fold_case
from rolegate.authz.validators import validate_role_definition
from rolegate.errors import ArgumentOutOfRangeError

logger = logging.getLogger(__name__)


class RoleAssignmentProvider(ABC):
    """Resolves the role assignments held by an identity."""

    @abstractmethod
    def get_role_assignments_by_identity(
        self, identity: Any
    ) -> Optional[Iterable[RoleAssignment]]:
        """Return the assignments applying to *identity*.

        ``None`` and an empty iterable both mean "no assignments".
        """
        ...


class RoleDefinitionProvider(ABC):
    """Resolves role definitions by id."""

    @abstractmethod
    def get_role_definition_by_id(self, id: str) -> Optional[RoleDefinition]:
        """Return the definition for *id*, or ``None`` if unknown.

        Ids compare case-insensitively.
        """
        ...


class MemoryRoleDefinitionProvider(RoleDefinitionProvider):
    """Resolves role definitions from a fixed in-memory collection.

    The index is built once in the constructor and never modified, so a
    single instance can be shared across threads without locking.

    Parameters
    ----------
    role_definitions:
        Definitions to index.  ``None`` is treated as empty and ``None``
        entries are skipped.  Each entry is validated (it only needs
        ``id``, ``assignable_scopes`` and ``permissions`` attributes).
        Duplicate ids, compared case-insensitively, raise
        :class:`~rolegate.errors.ArgumentOutOfRangeError`.
    """

    def __init__(self, role_definitions: Optional[Iterable[Any]] = None) -> None:
        self._definitions: Mapping[str, Any] = MappingProxyType(
            self._index_by_id(role_definitions)
        )
        logger.debug("Indexed %d role definition(s)", len(self._definitions))

    @property
    def role_definitions(self) -> Mapping[str, Any]:
        """Read-only view of the index (keys are case-folded ids)."""
        return self._definitions

    def get_role_definition_by_id(self, id: str) -> Optional[RoleDefinition]:
        if not id:
            return None
        return self._definitions.get(fold_case(id))

    @staticmethod
    def _index_by_id(role_definitions: Optional[Iterable[Any]]) -> Dict[str, Any]:
        index: Dict[str, Any] = {}
        if role_definitions is None:
            return index

        for role_definition in role_definitions:
            if role_definition is None:
                continue

            validate_role_definition(role_definition)

            key = fold_case(role_definition.id)
            if key in index:
                raise ArgumentOutOfRangeError(
                    "role_definitions",
                    f"Role definition with id '{role_definition.id}' already exists",
                )
            index[key] = role_definition
        return index


def _principal_of(identity: Any) -> Optional[str]:
    if isinstance(identity, str):
        return identity
    return getattr(identity, "subject", None)


def assignment_applies_to_principal(assignment: RoleAssignment, identity: Any) -> bool:
    """Default applicability check: ``principal_id`` equals the identity's subject.

    Comparison is case-insensitive.  Assignments without a principal never
    apply.
    """
    principal = _principal_of(identity)
    if not principal or not assignment.principal_id:
        return False
    return fold_case(assignment.principal_id) == fold_case(principal)


class MemoryRoleAssignmentProvider(RoleAssignmentProvider):
    """Serves role assignments from a fixed in-memory list.

    Parameters
    ----------
    role_assignments:
        All known assignments, in evaluation order.
    applies_to:
        ``(assignment, identity) -> bool`` deciding whether an assignment
        belongs to an identity.  Defaults to
        :func:`assignment_applies_to_principal`.
    """

    def __init__(
        self,
        role_assignments: Optional[Iterable[RoleAssignment]] = None,
        applies_to: Optional[Callable[[RoleAssignment, Any], bool]] = None,
    ) -> None:
        self._assignments = tuple(role_assignments or ())
        self._applies_to = applies_to or assignment_applies_to_principal

    @property
    def role_assignments(self) -> tuple:
        return self._assignments

    def get_role_assignments_by_identity(self, identity: Any) -> List[RoleAssignment]:
        return [a for a in self._assignments if self._applies_to(a, identity)]
