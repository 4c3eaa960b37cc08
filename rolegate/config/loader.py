"""Configuration file loading and validation.

Loads a YAML configuration file, expands ``${ENV_VAR}`` placeholders,
and validates against Pydantic models defined in :mod:`schema`.

The public API is :func:`load_rolegate_config`, which returns the
validated :class:`RoleGateConfig`, and :func:`build_engine`, which turns
it into a ready :class:`AuthorizationEngine`.
"""

import logging
import os
import re
from typing import Any, Dict, List, Set

import yaml
from pydantic import ValidationError

from rolegate.authz.engine import AuthorizationEngine
from rolegate.authz.permissions import fold_case
from rolegate.config.schema import AuthorizationConfig, RoleGateConfig
from rolegate.errors import ConfigurationError, RoleGateError

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

# ${NAME} or ${NAME:-fallback}
_PLACEHOLDER_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


def _substitute_env(raw_data: Any, unresolved: Set[str]) -> Any:
    """Replace ``${NAME}`` placeholders in the string leaves of *raw_data*.

    ``${NAME:-fallback}`` yields *fallback* when ``NAME`` is unset.  An
    unset name without a fallback keeps its placeholder verbatim and is
    added to *unresolved*.  Mapping keys are never substituted.
    """

    def _replace(match: "re.Match[str]") -> str:
        name, fallback = match.group(1), match.group(2)
        value = os.environ.get(name)
        if value is not None:
            return value
        if fallback is not None:
            return fallback
        unresolved.add(name)
        return match.group(0)

    if isinstance(raw_data, str):
        return _PLACEHOLDER_RE.sub(_replace, raw_data)
    if isinstance(raw_data, dict):
        return {key: _substitute_env(item, unresolved) for key, item in raw_data.items()}
    if isinstance(raw_data, list):
        return [_substitute_env(item, unresolved) for item in raw_data]
    return raw_data


def _warn_dangling_assignments(authz: AuthorizationConfig) -> None:
    """Log assignments whose role definition is not configured.

    The engine skips such assignments at check time; this only surfaces
    the likely typo early.
    """
    known = {fold_case(d.id) for d in authz.role_definitions}
    for assignment in authz.role_assignments:
        if fold_case(assignment.role_definition_id) not in known:
            logger.warning(
                "Role assignment '%s' references unknown role definition '%s'.",
                assignment.id,
                assignment.role_definition_id,
            )


# ── Public API ───────────────────────────────────────────────────────────


def load_rolegate_config(cfg_fpath: str) -> RoleGateConfig:
    """Load, expand and validate a RoleGate configuration file.

    Steps:
        1. Read YAML file
        2. Expand ``${VAR}`` environment variable references
        3. Validate against :class:`RoleGateConfig` (Pydantic)

    Raises:
        ConfigurationError: On file I/O errors, parse errors, or
            validation failures (all errors reported at once).
    """
    logger.debug("Loading configuration file: %s", cfg_fpath)

    if not os.path.exists(cfg_fpath):
        raise ConfigurationError(f"Configuration file does not exist: {cfg_fpath}")

    raw_data = _read_config_file(cfg_fpath)

    unresolved: Set[str] = set()
    raw_data = _substitute_env(raw_data, unresolved)
    if unresolved:
        logger.warning(
            "Unset environment variable(s) left unexpanded in %s: %s",
            cfg_fpath,
            ", ".join(sorted(unresolved)),
        )

    try:
        config = RoleGateConfig.model_validate(raw_data)
    except ValidationError as exc:
        error_summary = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Configuration validation failed ({len(exc.errors())} error(s)):\n" f"{error_summary}"
        ) from exc

    _warn_dangling_assignments(config.authorization)

    logger.info(
        "Configuration '%s' loaded (v%s). %d role definition(s), %d role assignment(s).",
        cfg_fpath,
        config.version,
        len(config.authorization.role_definitions),
        len(config.authorization.role_assignments),
    )
    return config


def build_engine(config: RoleGateConfig) -> AuthorizationEngine:
    """Create an :class:`AuthorizationEngine` from a validated config."""
    try:
        return AuthorizationEngine.from_config(config.authorization)
    except RoleGateError as exc:
        raise ConfigurationError(f"Invalid authorization configuration: {exc}") from exc
