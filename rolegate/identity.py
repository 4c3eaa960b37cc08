"""Requesting identity.

The authorization engine treats identities as opaque values and hands
them to the role assignment provider unchanged.  :class:`Identity` is the
shape the in-memory provider understands; hosts with their own identity
types can pass those instead, along with a provider that knows how to
read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class Identity:
    """An authenticated principal.

    ``subject`` is matched against :attr:`RoleAssignment.principal_id`.
    """

    subject: str
    name: str = ""
    claims: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
