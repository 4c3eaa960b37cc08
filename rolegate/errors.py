"""
Defines project-specific exception classes.
"""
from typing import Optional


class RoleGateError(Exception):
    """Base class for all custom exceptions in RoleGate."""
    pass


class ConfigurationError(RoleGateError):
    """Raised when loading or validating the configuration file fails."""
    pass


class ArgumentNullError(RoleGateError, TypeError):
    """
    Raised when a required argument (identity, callback, provider,
    collection of scopes) is missing.
    """

    def __init__(self, param_name: str, message: Optional[str] = None):
        self.param_name = param_name
        full_msg = f"Argument '{param_name}' must not be None"
        if message:
            full_msg = f"{message} (parameter: {param_name})"
        super().__init__(full_msg)


class ArgumentOutOfRangeError(RoleGateError, ValueError):
    """
    Raised when a provided value is structurally invalid: empty strings,
    wildcard-bearing permissions, unrooted scopes, empty collections or
    duplicate role definition ids.
    """

    def __init__(self, param_name: str, message: str):
        self.param_name = param_name
        super().__init__(f"{message} (parameter: {param_name})")
