"""Pydantic configuration models for RoleGate.

Defines the validated config structure using the versioned v1 format::

    version: "1"
    authorization:
      evaluate_all: true
      role_definitions:
        - id: child
          display_name: Child
          assignable_scopes: ["/Daycare", "/Playground"]
          permissions: ["Bubble/view", "Bubble/burst"]
      role_assignments:
        - id: a-1
          role_definition_id: child
          scope: /Daycare/LittleBee
          principal_id: bumble-bee
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from rolegate.authz.models import RoleAssignment, RoleDefinition
from rolegate.authz.permissions import fold_case
from rolegate.authz.validators import (
    validate_permission_pattern,
    validate_scope,
)


class RoleDefinitionConfig(BaseModel):
    """A role definition entry."""

    id: str = Field(min_length=1, description="Unique id (case-insensitive).")
    display_name: str = Field(default="", description="Human-readable role name.")
    assignable_scopes: List[str] = Field(
        min_length=1,
        description="Rooted scopes this role may be assigned at.",
    )
    permissions: List[str] = Field(
        min_length=1,
        description="Permission patterns granted by this role. '*' matches whole segments.",
    )

    @field_validator("assignable_scopes")
    @classmethod
    def _validate_assignable_scopes(cls, v: List[str]) -> List[str]:
        for scope in v:
            validate_scope(scope, "assignable_scopes")
        return v

    @field_validator("permissions")
    @classmethod
    def _validate_permissions(cls, v: List[str]) -> List[str]:
        for pattern in v:
            validate_permission_pattern(pattern, "permissions")
        return v

    def to_role_definition(self) -> RoleDefinition:
        return RoleDefinition(
            id=self.id,
            display_name=self.display_name,
            assignable_scopes=tuple(self.assignable_scopes),
            permissions=tuple(self.permissions),
        )


class RoleAssignmentConfig(BaseModel):
    """A role assignment entry."""

    id: str = Field(min_length=1, description="Unique assignment id.")
    role_definition_id: str = Field(min_length=1, description="Referenced role definition id.")
    scope: str = Field(description="Rooted scope the role is assigned at.")
    principal_id: Optional[str] = Field(
        default=None,
        description="Subject of the identity holding this assignment.",
    )

    @field_validator("scope")
    @classmethod
    def _validate_scope(cls, v: str) -> str:
        validate_scope(v, "scope")
        return v

    def to_role_assignment(self) -> RoleAssignment:
        return RoleAssignment(
            id=self.id,
            role_definition_id=self.role_definition_id,
            scope=self.scope,
            principal_id=self.principal_id,
        )


class AuthorizationConfig(BaseModel):
    """Role definitions, role assignments and evaluation settings."""

    evaluate_all: bool = Field(
        default=True,
        description="Collect every granting assignment instead of stopping at the first.",
    )
    role_definitions: List[RoleDefinitionConfig] = Field(default_factory=list)
    role_assignments: List[RoleAssignmentConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_unique_definition_ids(self) -> AuthorizationConfig:
        seen: set = set()
        for definition in self.role_definitions:
            key = fold_case(definition.id)
            if key in seen:
                raise ValueError(f"Role definition with id '{definition.id}' already exists")
            seen.add(key)
        return self


class RoleGateConfig(BaseModel):
    """Top-level validated configuration for RoleGate."""

    version: str = "1"
    authorization: AuthorizationConfig = Field(default_factory=AuthorizationConfig)
