"""Configuration loading and validation for RoleGate."""

from rolegate.config.loader import build_engine, load_rolegate_config
from rolegate.config.schema import (
    AuthorizationConfig,
    RoleAssignmentConfig,
    RoleDefinitionConfig,
    RoleGateConfig,
)

__all__ = [
    "AuthorizationConfig",
    "RoleAssignmentConfig",
    "RoleDefinitionConfig",
    "RoleGateConfig",
    "build_engine",
    "load_rolegate_config",
]
