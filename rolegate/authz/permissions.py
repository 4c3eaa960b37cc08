"""Permission pattern matching.

A permission is a ``/``-delimited sequence of segments such as
``Microsoft.Compute/virtualMachines/start/action``.  A permission pattern
has the same shape, but any segment may be the wildcard ``*`` which
matches zero or more *whole* segments::

    is_match("Microsoft.Compute/*/action", "Microsoft.Compute/vm/start/action")  # True
    is_match("Microsoft.Compute/*", "Microsoft.Compute")                         # True
    is_match("A/*/B/D", "A/B")                                                   # False

Segments compare ordinal, case-insensitive.  Empty segments produced by
repeated or trailing delimiters are discarded before matching.
"""

from __future__ import annotations

from typing import List

from rolegate.authz.validators import validate_permission, validate_permission_pattern
from rolegate.constants import PERMISSION_DELIMITERS, WILDCARD

__all__ = [
    "PERMISSION_DELIMITERS",
    "WILDCARD",
    "fold_case",
    "is_match",
    "split_segments",
]


def fold_case(value: str) -> str:
    """Upper-case *value* one character at a time (ordinal ignore-case).

    A character whose upper-case form is longer than one character, such
    as the German sharp s, is kept unchanged.  The Kelvin sign is already upper case and stays
    distinct from ``K``.
    """
    if value.isascii():
        return value.upper()
    return "".join(ch if len(ch.upper()) != 1 else ch.upper() for ch in value)


def split_segments(value: str, delimiters: tuple = PERMISSION_DELIMITERS) -> List[str]:
    """Split *value* on *delimiters*, dropping empty segments.

    Segments are passed through :func:`fold_case` so callers can compare
    them directly.
    """
    primary = delimiters[0]
    for extra in delimiters[1:]:
        value = value.replace(extra, primary)
    return [fold_case(segment) for segment in value.split(primary) if segment]


def is_match(pattern: str, permission: str) -> bool:
    """Return ``True`` if *permission* matches the wildcard *pattern*.

    Raises :class:`~rolegate.errors.ArgumentOutOfRangeError` if either
    argument is None, empty, starts with a delimiter, or (for
    *permission*) contains a wildcard.
    """
    validate_permission_pattern(pattern, "pattern")
    validate_permission(permission, "permission")

    return _segments_match(split_segments(pattern), split_segments(permission))


def _segments_match(pattern_segs: List[str], permission_segs: List[str]) -> bool:
    pattern_len = len(pattern_segs)
    permission_len = len(permission_segs)

    pat_idx = 0
    perm_idx = 0
    # Pattern position just past the most recent wildcard; -1 until one is seen.
    restart_idx = -1

    while perm_idx < permission_len:
        segment = permission_segs[perm_idx]

        if pat_idx < pattern_len and pattern_segs[pat_idx] == segment:
            pat_idx += 1
            perm_idx += 1
        elif pat_idx < pattern_len and pattern_segs[pat_idx] == WILDCARD:
            # A/*/B/C/D against A/s/B/C/XXX/B/C/D: the first B/C is a false
            # start, so the segment after the wildcard stays a restart point.
            pat_idx += 1
            restart_idx = pat_idx
        elif restart_idx != -1:
            pat_idx = restart_idx
            if pat_idx >= pattern_len:
                # Trailing wildcard swallows the rest of the permission.
                return True
            if pattern_segs[pat_idx] == segment:
                pat_idx += 1
            perm_idx += 1
        else:
            return False

    # Permission consumed: whatever is left of the pattern must be wildcards.
    while pat_idx < pattern_len:
        if pattern_segs[pat_idx] != WILDCARD:
            return False
        pat_idx += 1
    return True
