"""Shared constants for RoleGate."""

APP_NAME = "RoleGate"
APP_VERSION = "0.1.0"

# Permission / scope grammar
WILDCARD = "*"
PERMISSION_DELIMITERS = ("/",)
SCOPE_DELIMITERS = ("/",)

# Config file lookup
CONFIG_ENV_VAR = "ROLEGATE_CONFIG"
CONFIG_SEARCH_ORDER = ("rolegate.yaml", "rolegate.yml")

# Logging defaults
LOG_DIR = "logs"
