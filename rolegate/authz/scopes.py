"""Scope prefix matching.

Scopes are rooted, ``/``-delimited paths (``/Daycare/LittleBee``).  A
child scope matches a parent when the parent's segments are an ordered,
case-insensitive prefix of the child's.  A parent with no segments at all
(``/`` or ``/////``) matches every child.
"""

from __future__ import annotations

from typing import Iterable, List

from rolegate.authz.permissions import split_segments
from rolegate.authz.validators import validate_scope, validate_scopes
from rolegate.constants import SCOPE_DELIMITERS

__all__ = [
    "SCOPE_DELIMITERS",
    "is_prefix_match",
    "is_prefix_match_any",
]


def is_prefix_match(parent: str, child: str) -> bool:
    """Return ``True`` if *child* equals or is nested under *parent*.

    Both scopes must be rooted or
    :class:`~rolegate.errors.ArgumentOutOfRangeError` is raised.
    """
    validate_scope(parent, "parent")
    validate_scope(child, "child")

    return _prefix_matches(_scope_segments(parent), _scope_segments(child))


def is_prefix_match_any(parents: Iterable[str], child: str) -> bool:
    """Return ``True`` if *child* matches at least one of *parents*.

    *parents* must be a non-empty collection of rooted scopes.
    """
    if parents is not None and not isinstance(parents, str):
        # Validation walks the collection once; generators would be exhausted.
        parents = list(parents)
    validate_scopes(parents, "parents")
    validate_scope(child, "child")

    child_segs = _scope_segments(child)
    return any(_prefix_matches(_scope_segments(parent), child_segs) for parent in parents)


def _scope_segments(scope: str) -> List[str]:
    return split_segments(scope, SCOPE_DELIMITERS)


def _prefix_matches(parent_segs: List[str], child_segs: List[str]) -> bool:
    if not parent_segs:
        return True
    if len(child_segs) < len(parent_segs):
        return False
    return child_segs[: len(parent_segs)] == parent_segs
