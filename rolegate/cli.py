"""CLI argument parsing and main entry point.

Subcommands:

* ``rolegate check``    — evaluate an access request against a config file.
* ``rolegate validate`` — load a config file and report what it defines.
* ``rolegate match``    — test a permission against a permission pattern.
* ``rolegate prefix``   — test a child scope against a parent scope.

``check`` exits 0 when access is granted and 1 when it is denied.  Any
configuration or argument error exits 2.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from rolegate.constants import (
    APP_NAME,
    APP_VERSION,
    CONFIG_ENV_VAR,
    CONFIG_SEARCH_ORDER,
    LOG_DIR,
)
from rolegate.display.logging_config import setup_logging
from rolegate.errors import RoleGateError

module_logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_GRANTED = 0
EXIT_DENIED = 1
EXIT_ERROR = 2


def _find_config_file() -> str:
    """Locate the config file: ``rolegate.yaml`` → ``rolegate.yml`` in CWD.

    Falls back to ``CWD/rolegate.yaml`` if nothing exists (loader will error).
    """
    for name in CONFIG_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return os.path.join(os.getcwd(), CONFIG_SEARCH_ORDER[0])


def _resolve_config_path(config_path: Optional[str]) -> str:
    """Resolve config path: CLI flag → env var → auto-detect."""
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR)
    if config_path is None:
        config_path = _find_config_file()
    return os.path.abspath(config_path)


def _maybe_setup_logging(args: argparse.Namespace) -> None:
    if getattr(args, "log_level", None):
        setup_logging(args.log_level, quiet=True, log_dir=args.log_dir)


# ── ``rolegate check`` ──────────────────────────────────────────────────


def _cmd_check(args: argparse.Namespace) -> int:
    """Entry-point for ``rolegate check``."""
    from rolegate.config.loader import build_engine, load_rolegate_config
    from rolegate.identity import Identity

    _maybe_setup_logging(args)
    cfg_abs_path = _resolve_config_path(args.config)
    module_logger.info("Configuration file path resolved to: %s", cfg_abs_path)

    try:
        config = load_rolegate_config(cfg_abs_path)
        engine = build_engine(config)
        evaluate_all = config.authorization.evaluate_all and not args.first_match
        decision = engine.check_access(
            Identity(subject=args.principal),
            args.scope,
            args.permission,
            evaluate_all=evaluate_all,
        )
    except RoleGateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    if decision.granted:
        print("GRANTED")
        for assignment in decision.matched_assignments:
            print(
                f"  {assignment.id}  role={assignment.role_definition_id}  "
                f"scope={assignment.scope}"
            )
        return EXIT_GRANTED

    print("DENIED")
    return EXIT_DENIED


# ── ``rolegate validate`` ───────────────────────────────────────────────


def _cmd_validate(args: argparse.Namespace) -> int:
    """Entry-point for ``rolegate validate``."""
    from rolegate.config.loader import build_engine, load_rolegate_config

    _maybe_setup_logging(args)
    cfg_abs_path = _resolve_config_path(args.config)

    try:
        config = load_rolegate_config(cfg_abs_path)
        build_engine(config)
    except RoleGateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    authz = config.authorization
    print(f"Configuration OK: {cfg_abs_path}")
    print(f"  {len(authz.role_definitions)} role definition(s)")
    for definition in authz.role_definitions:
        label = definition.display_name or definition.id
        print(f"    {label:<24s}  {len(definition.permissions)} permission pattern(s)")
    print(f"  {len(authz.role_assignments)} role assignment(s)")
    return EXIT_OK


# ── ``rolegate match`` / ``rolegate prefix`` ────────────────────────────


def _cmd_match(args: argparse.Namespace) -> int:
    """Entry-point for ``rolegate match``."""
    from rolegate.authz.permissions import is_match

    try:
        matched = is_match(args.pattern, args.permission)
    except RoleGateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    print("MATCH" if matched else "NO MATCH")
    return EXIT_GRANTED if matched else EXIT_DENIED


def _cmd_prefix(args: argparse.Namespace) -> int:
    """Entry-point for ``rolegate prefix``."""
    from rolegate.authz.scopes import is_prefix_match

    try:
        matched = is_prefix_match(args.parent, args.child)
    except RoleGateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    print("MATCH" if matched else "NO MATCH")
    return EXIT_GRANTED if matched else EXIT_DENIED


# ── CLI parser construction ──────────────────────────────────────────────


def _add_config_arguments(sp: argparse.ArgumentParser) -> None:
    sp.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Path to configuration file (YAML). "
            f"Default: ${CONFIG_ENV_VAR}, then auto-detect rolegate.yaml/rolegate.yml"
        ),
    )
    sp.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Enable file logging at this level (default: no file logging)",
    )
    sp.add_argument(
        "--log-dir",
        type=str,
        default=LOG_DIR,
        metavar="DIR",
        help=f"Directory for log files (default: {LOG_DIR})",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with check/validate/match/prefix subcommands."""
    parser = argparse.ArgumentParser(
        prog="rolegate",
        description=f"{APP_NAME} v{APP_VERSION}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # ── check ───────────────────────────────────────────────────
    sp_check = subparsers.add_parser(
        "check",
        help="Check whether a principal holds a permission at a scope",
    )
    sp_check.add_argument(
        "--principal",
        type=str,
        required=True,
        help="Subject of the requesting identity",
    )
    sp_check.add_argument(
        "--scope",
        type=str,
        required=True,
        help="Rooted resource scope, e.g. /Daycare/LittleBee",
    )
    sp_check.add_argument(
        "--permission",
        type=str,
        required=True,
        help="Permission to check, e.g. Bubble/burst",
    )
    sp_check.add_argument(
        "--first-match",
        action="store_true",
        default=False,
        help="Stop at the first granting role assignment",
    )
    _add_config_arguments(sp_check)
    sp_check.set_defaults(func=_cmd_check)

    # ── validate ────────────────────────────────────────────────
    sp_validate = subparsers.add_parser(
        "validate",
        help="Validate a configuration file",
    )
    _add_config_arguments(sp_validate)
    sp_validate.set_defaults(func=_cmd_validate)

    # ── match ───────────────────────────────────────────────────
    sp_match = subparsers.add_parser(
        "match",
        help="Test a permission against a permission pattern",
    )
    sp_match.add_argument("pattern", help="Permission pattern, e.g. Bubble/*")
    sp_match.add_argument("permission", help="Permission, e.g. Bubble/burst")
    sp_match.set_defaults(func=_cmd_match)

    # ── prefix ──────────────────────────────────────────────────
    sp_prefix = subparsers.add_parser(
        "prefix",
        help="Test whether a child scope is nested under a parent scope",
    )
    sp_prefix.add_argument("parent", help="Parent scope, e.g. /Daycare")
    sp_prefix.add_argument("child", help="Child scope, e.g. /Daycare/LittleBee")
    sp_prefix.set_defaults(func=_cmd_prefix)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_DENIED
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
