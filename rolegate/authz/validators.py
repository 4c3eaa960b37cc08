"""Validation primitives for permissions, scopes and role definitions.

Every check raises on the first violation:

* :class:`~rolegate.errors.ArgumentNullError` when a required reference
  (a collection of scopes, a role definition) is missing.
* :class:`~rolegate.errors.ArgumentOutOfRangeError` when a value is
  present but structurally invalid.

Nothing here mutates its arguments, so a failed validation leaves no
partial state behind.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from rolegate.constants import PERMISSION_DELIMITERS, SCOPE_DELIMITERS, WILDCARD
from rolegate.errors import ArgumentNullError, ArgumentOutOfRangeError

# Error kind → message template.
_MESSAGES = {
    "permission_empty": "Permission must not be None or empty",
    "permission_wildcard": "Permission cannot contain wildcards - '{value}'",
    "permission_delimiter": (
        "Permission '{value}' must not start with a delimiter (one of '{delimiters}')"
    ),
    "pattern_empty": "Permission pattern must not be None or empty",
    "pattern_delimiter": (
        "Permission pattern '{value}' must not start with a delimiter (one of '{delimiters}')"
    ),
    "scope_empty": "Scope must not be None or empty",
    "scope_unrooted": "Scope '{value}' must start with a delimiter (one of '{delimiters}')",
    "scopes_none": "Collection of scopes cannot be None",
    "scopes_empty": "Collection of scopes must contain at least one entry",
    "scopes_string": "Expected a collection of scopes, got a single string '{value}'",
    "patterns_string": "Expected a collection of permission patterns, got a single string '{value}'",
    "definition_id_empty": "Role definition 'id' cannot be None or empty",
    "definition_field_none": "Role definition '{field}' cannot be None",
    "definition_field_empty": "Role definition '{field}' must contain at least one entry",
}


def _message(kind: str, **kwargs: Any) -> str:
    return _MESSAGES[kind].format(**kwargs)


def validate_permission(permission: Optional[str], param_name: str = "permission") -> None:
    """Validate a concrete permission (``Bubble/burst``)."""
    if not permission:
        raise ArgumentOutOfRangeError(param_name, _message("permission_empty"))

    if WILDCARD in permission:
        raise ArgumentOutOfRangeError(
            param_name, _message("permission_wildcard", value=permission)
        )

    if permission[0] in PERMISSION_DELIMITERS:
        raise ArgumentOutOfRangeError(
            param_name,
            _message(
                "permission_delimiter",
                value=permission,
                delimiters=", ".join(PERMISSION_DELIMITERS),
            ),
        )


def validate_permission_pattern(pattern: Optional[str], param_name: str = "pattern") -> None:
    """Validate a permission pattern (``Bubble/*``).  Wildcards are allowed."""
    if not pattern:
        raise ArgumentOutOfRangeError(param_name, _message("pattern_empty"))

    if pattern[0] in PERMISSION_DELIMITERS:
        raise ArgumentOutOfRangeError(
            param_name,
            _message(
                "pattern_delimiter",
                value=pattern,
                delimiters=", ".join(PERMISSION_DELIMITERS),
            ),
        )


def validate_scope(scope: Optional[str], param_name: str = "scope") -> None:
    """Validate a scope.  Scopes must be rooted (``/Daycare/LittleBee``)."""
    if not scope:
        raise ArgumentOutOfRangeError(param_name, _message("scope_empty"))

    if scope[0] not in SCOPE_DELIMITERS:
        raise ArgumentOutOfRangeError(
            param_name,
            _message(
                "scope_unrooted",
                value=scope,
                delimiters=", ".join(SCOPE_DELIMITERS),
            ),
        )


def validate_scopes(scopes: Optional[Iterable[str]], param_name: str = "scopes") -> None:
    """Validate a non-empty collection of scopes."""
    if scopes is None:
        raise ArgumentNullError(param_name, _message("scopes_none"))

    if isinstance(scopes, str):
        raise ArgumentOutOfRangeError(param_name, _message("scopes_string", value=scopes))

    has_entries = False
    for scope in scopes:
        validate_scope(scope, param_name)
        has_entries = True

    if not has_entries:
        raise ArgumentOutOfRangeError(param_name, _message("scopes_empty"))


def validate_role_definition(role_definition: Any) -> None:
    """Validate any object shaped like a role definition.

    The object must expose ``id``, ``assignable_scopes`` and
    ``permissions`` attributes; missing attributes are treated as None.
    """
    if role_definition is None:
        raise ArgumentNullError("role_definition")

    validate_role_definition_components(
        getattr(role_definition, "id", None),
        getattr(role_definition, "assignable_scopes", None),
        getattr(role_definition, "permissions", None),
    )


def validate_role_definition_components(
    id: Optional[str],
    assignable_scopes: Optional[Iterable[str]],
    permissions: Optional[Iterable[str]],
) -> None:
    """Validate the individual components of a role definition."""
    if not id:
        raise ArgumentOutOfRangeError("id", _message("definition_id_empty"))

    _validate_assignable_scopes(assignable_scopes)
    _validate_permission_patterns(permissions)


def _validate_assignable_scopes(assignable_scopes: Optional[Iterable[str]]) -> None:
    if assignable_scopes is None:
        raise ArgumentOutOfRangeError(
            "assignable_scopes",
            _message("definition_field_none", field="assignable_scopes"),
        )
    if isinstance(assignable_scopes, str):
        raise ArgumentOutOfRangeError(
            "assignable_scopes", _message("scopes_string", value=assignable_scopes)
        )

    has_entries = False
    for scope in assignable_scopes:
        validate_scope(scope, "assignable_scopes")
        has_entries = True

    if not has_entries:
        raise ArgumentOutOfRangeError(
            "assignable_scopes",
            _message("definition_field_empty", field="assignable_scopes"),
        )


def _validate_permission_patterns(permissions: Optional[Iterable[str]]) -> None:
    if permissions is None:
        raise ArgumentOutOfRangeError(
            "permissions",
            _message("definition_field_none", field="permissions"),
        )
    if isinstance(permissions, str):
        raise ArgumentOutOfRangeError(
            "permissions", _message("patterns_string", value=permissions)
        )

    has_entries = False
    for pattern in permissions:
        validate_permission_pattern(pattern, "permissions")
        has_entries = True

    if not has_entries:
        raise ArgumentOutOfRangeError(
            "permissions",
            _message("definition_field_empty", field="permissions"),
        )
