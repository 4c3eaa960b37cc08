"""Tests for the authorization engine (daycare scenario)."""

from __future__ import annotations

from typing import Any, List
from unittest.mock import MagicMock

import pytest

from rolegate.authz.engine import AuthorizationEngine, allow_all
from rolegate.authz.models import ACCESS_DENIED, RoleAssignment, RoleDefinition
from rolegate.authz.providers import (
    MemoryRoleAssignmentProvider,
    MemoryRoleDefinitionProvider,
    RoleAssignmentProvider,
    RoleDefinitionProvider,
)
from rolegate.errors import ArgumentNullError, ArgumentOutOfRangeError
from rolegate.identity import Identity

PRINCIPAL = "94eee687-978a-434d-bd7f-dd479b3971e6"

DIRECTOR = RoleDefinition(
    id="31D55E52-735F-49DD-A47B-E885D71FCFBE",
    display_name="Director",
    assignable_scopes=("/Daycare",),
    permissions=("Teach/*", "Hire/*", "Purchase/*", "Bubble/*", "BubbleMachine/*"),
)
BUBBLE_MASTER = RoleDefinition(
    id="8ABDDD31-4519-4175-9034-0A5E30BD3359",
    display_name="Bubble Master",
    assignable_scopes=("/Playground", "/Daycare"),
    permissions=(
        "Bubble/view",
        "Bubble/burst",
        "BubbleMachine/on",
        "BubbleMachine/off",
        "BubbleMachine/refill",
        "BubbleMachine/move",
    ),
)
CHILD = RoleDefinition(
    id="FF49EF47-3E9B-4C22-8D35-61C982D980EF",
    display_name="Child",
    assignable_scopes=("/Playground", "/Daycare"),
    permissions=("Bubble/view", "Bubble/burst"),
)

DIRECTOR_AT_APPLE_TREE = RoleAssignment(
    id="7EB9A7B6-6136-4F3E-8051-61A5CDDF33FC",
    role_definition_id=DIRECTOR.id,
    scope="/DayCare/AppleTree",
    principal_id=PRINCIPAL,
)
BUBBLE_MASTER_AT_LITTLE_BEE = RoleAssignment(
    id="C96691BD-A804-4B14-9DAC-4A433161029D",
    role_definition_id=BUBBLE_MASTER.id,
    scope="/Daycare/LittleBee",
    principal_id=PRINCIPAL,
)
CHILD_AT_LITTLE_BEE = RoleAssignment(
    id="C8AD4774-74C7-4495-B366-03E6D37D11DF",
    role_definition_id=CHILD.id,
    scope="/Daycare/LittleBee",
    principal_id=PRINCIPAL,
)

ALL_DEFINITIONS = [DIRECTOR, BUBBLE_MASTER, CHILD]
ALL_ASSIGNMENTS = [DIRECTOR_AT_APPLE_TREE, BUBBLE_MASTER_AT_LITTLE_BEE, CHILD_AT_LITTLE_BEE]


def _engine(
    definitions: List[RoleDefinition] = ALL_DEFINITIONS,
    assignments: List[RoleAssignment] = ALL_ASSIGNMENTS,
) -> AuthorizationEngine:
    return AuthorizationEngine(
        MemoryRoleAssignmentProvider(assignments),
        MemoryRoleDefinitionProvider(definitions),
    )


@pytest.fixture
def identity() -> Identity:
    return Identity(subject=PRINCIPAL, name="bumble_bee@beedaycare.com")


class _StaticAssignments(RoleAssignmentProvider):
    def __init__(self, result: Any) -> None:
        self.result = result

    def get_role_assignments_by_identity(self, identity: Any) -> Any:
        return self.result


# ── Construction ─────────────────────────────────────────────────────────


class TestConstruction:
    def test_null_providers(self) -> None:
        with pytest.raises(ArgumentNullError):
            AuthorizationEngine(None, None)  # type: ignore[arg-type]
        with pytest.raises(ArgumentNullError) as exc_info:
            AuthorizationEngine(MemoryRoleAssignmentProvider(), None)  # type: ignore[arg-type]
        assert exc_info.value.param_name == "role_definition_provider"

    def test_accessors(self) -> None:
        engine = _engine()
        assert isinstance(engine.role_assignment_provider, RoleAssignmentProvider)
        assert isinstance(engine.role_definition_provider, RoleDefinitionProvider)


# ── Preconditions ────────────────────────────────────────────────────────


class TestPreconditions:
    def test_null_identity(self) -> None:
        with pytest.raises(ArgumentNullError):
            _engine().check_access(None, None, None)  # type: ignore[arg-type]

    def test_invalid_resource(self, identity: Identity) -> None:
        with pytest.raises(ArgumentOutOfRangeError) as exc_info:
            _engine().check_access(identity, None, None)  # type: ignore[arg-type]
        assert exc_info.value.param_name == "resource"
        with pytest.raises(ArgumentOutOfRangeError):
            _engine().check_access(identity, "Foo/Bar", "Walrus/pet")

    def test_invalid_permission(self, identity: Identity) -> None:
        with pytest.raises(ArgumentOutOfRangeError) as exc_info:
            _engine().check_access(identity, "/Foo/Bar", None)  # type: ignore[arg-type]
        assert exc_info.value.param_name == "permission"
        with pytest.raises(ArgumentOutOfRangeError):
            _engine().check_access(identity, "/Foo/Bar", "Walrus/*")

    def test_null_callback(self, identity: Identity) -> None:
        with pytest.raises(ArgumentNullError) as exc_info:
            _engine().check_access(identity, "/Foo/Bar", "Walrus/pet", None)  # type: ignore[arg-type]
        assert exc_info.value.param_name == "check_callback"

    def test_providers_not_consulted_on_invalid_input(self, identity: Identity) -> None:
        assignments = MagicMock(spec=RoleAssignmentProvider)
        definitions = MagicMock(spec=RoleDefinitionProvider)
        engine = AuthorizationEngine(assignments, definitions)
        with pytest.raises(ArgumentOutOfRangeError):
            engine.check_access(identity, "/Foo", "/bad")
        assignments.get_role_assignments_by_identity.assert_not_called()
        definitions.get_role_definition_by_id.assert_not_called()


# ── Decisions ────────────────────────────────────────────────────────────


class TestCheckAccess:
    def test_authorized(self, identity: Identity) -> None:
        decision = _engine().check_access(
            identity, "/Daycare/LittleBee/Playground", "BubbleMachine/move"
        )
        assert decision.granted
        assert [a.id for a in decision.matched_assignments] == [BUBBLE_MASTER_AT_LITTLE_BEE.id]

    def test_not_authorized(self, identity: Identity) -> None:
        decision = _engine().check_access(identity, "/Daycare/LittleBee", "Purchase/BubbleMachine")
        assert not decision.granted
        assert decision.matched_assignments == ()
        assert decision is ACCESS_DENIED

    def test_director_scope_is_case_insensitive(self, identity: Identity) -> None:
        decision = _engine().check_access(identity, "/daycare/appletree/room1", "Purchase/crayons")
        assert [a.id for a in decision.matched_assignments] == [DIRECTOR_AT_APPLE_TREE.id]

    def test_child_only_scenario(self, identity: Identity) -> None:
        engine = _engine(assignments=[CHILD_AT_LITTLE_BEE])
        granted = engine.check_access(identity, "/Daycare/LittleBee/Playground", "Bubble/burst")
        assert granted.granted
        assert granted.matched_assignments == (CHILD_AT_LITTLE_BEE,)

        denied = engine.check_access(identity, "/Daycare/LittleBee", "Purchase/BubbleMachine")
        assert not denied.granted
        assert denied.matched_assignments == ()

    def test_evaluate_all_returns_every_match_in_order(self, identity: Identity) -> None:
        decision = _engine().check_access(
            identity, "/Daycare/LittleBee/Playground", "Bubble/burst", allow_all, True
        )
        assert decision.granted
        assert [a.id for a in decision.matched_assignments] == [
            BUBBLE_MASTER_AT_LITTLE_BEE.id,
            CHILD_AT_LITTLE_BEE.id,
        ]

    def test_first_match_only(self, identity: Identity) -> None:
        decision = _engine().check_access(
            identity, "/Daycare/LittleBee/Playground", "Bubble/burst", evaluate_all=False
        )
        assert [a.id for a in decision.matched_assignments] == [BUBBLE_MASTER_AT_LITTLE_BEE.id]

    def test_callback_excludes_assignment(self, identity: Identity) -> None:
        decision = _engine().check_access(
            identity,
            "/Daycare/LittleBee/Playground",
            "Bubble/burst",
            lambda ident, assignment, definition: definition.display_name != "Child",
        )
        assert decision.granted
        assert [a.id for a in decision.matched_assignments] == [BUBBLE_MASTER_AT_LITTLE_BEE.id]

    def test_callback_receives_arguments(self, identity: Identity) -> None:
        calls = []

        def callback(ident, assignment, definition) -> bool:
            calls.append((ident, assignment, definition))
            return False

        decision = _engine(assignments=[CHILD_AT_LITTLE_BEE]).check_access(
            identity, "/Daycare/LittleBee", "Bubble/view", callback
        )
        assert not decision.granted
        assert calls == [(identity, CHILD_AT_LITTLE_BEE, CHILD)]

    def test_callback_only_invoked_for_granting_assignments(self, identity: Identity) -> None:
        callback = MagicMock(return_value=True)
        _engine().check_access(identity, "/Daycare/LittleBee", "BubbleMachine/on", callback)
        assert callback.call_count == 1

    def test_has_access(self, identity: Identity) -> None:
        engine = _engine()
        assert engine.has_access(identity, "/Daycare/LittleBee", "Bubble/view")
        assert not engine.has_access(identity, "/Playground", "Bubble/view")


# ── Skipped assignments ──────────────────────────────────────────────────


class TestSkippedAssignments:
    def test_out_of_scope_assignment(self, identity: Identity) -> None:
        decision = _engine().check_access(identity, "/Daycare", "Bubble/view")
        assert not decision.granted

    def test_unknown_role_definition_is_skipped(self, identity: Identity) -> None:
        dangling = RoleAssignment(
            id="dangling", role_definition_id="missing", scope="/Daycare", principal_id=PRINCIPAL
        )
        decision = _engine(assignments=[dangling, CHILD_AT_LITTLE_BEE]).check_access(
            identity, "/Daycare/LittleBee", "Bubble/view"
        )
        assert decision.matched_assignments == (CHILD_AT_LITTLE_BEE,)

    def test_definition_not_assignable_at_scope(self, identity: Identity) -> None:
        misplaced = RoleAssignment(
            id="misplaced",
            role_definition_id=DIRECTOR.id,
            scope="/Playground",
            principal_id=PRINCIPAL,
        )
        decision = _engine(assignments=[misplaced]).check_access(
            identity, "/Playground/Sandbox", "Bubble/view"
        )
        assert not decision.granted

    def test_assignable_scopes_checked_against_assignment_scope(self, identity: Identity) -> None:
        # Resource is inside /Daycare, but the assignment at / is not.
        director_at_root = RoleAssignment(
            id="director-root",
            role_definition_id=DIRECTOR.id,
            scope="/",
            principal_id=PRINCIPAL,
        )
        engine = _engine(assignments=[director_at_root])
        decision = engine.check_access(identity, "/Daycare/LittleBee", "Purchase/x")
        assert not decision.granted
        assert decision.matched_assignments == ()

    def test_other_identity_has_no_access(self) -> None:
        decision = _engine().check_access(
            Identity(subject="someone-else"), "/Daycare/LittleBee", "Bubble/view"
        )
        assert decision is ACCESS_DENIED

    @pytest.mark.parametrize("result", [None, [], ()])
    def test_no_assignments(self, identity: Identity, result: Any) -> None:
        engine = AuthorizationEngine(_StaticAssignments(result), MemoryRoleDefinitionProvider())
        assert engine.check_access(identity, "/a", "b") is ACCESS_DENIED

    def test_provider_errors_propagate(self, identity: Identity) -> None:
        class Broken(RoleAssignmentProvider):
            def get_role_assignments_by_identity(self, identity: Any) -> Any:
                raise RuntimeError("store unavailable")

        engine = AuthorizationEngine(Broken(), MemoryRoleDefinitionProvider())
        with pytest.raises(RuntimeError, match="store unavailable"):
            engine.check_access(identity, "/a", "b")
