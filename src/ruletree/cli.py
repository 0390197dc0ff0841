"""Command-line interface for ruletree.

This module lets rule authors inspect and try out rule trees defined in
importable Python modules.

Usage:
    python -m ruletree describe <module:attr>
    python -m ruletree run <module:attr> --input <json> [--repeat]

Commands:
    describe    Print the rendering of a rule tree.
    run         Run a rule tree against a JSON input payload.

The target attribute must be a ``Node`` (compiled on the fly) or an
already compiled ``Tree``.

Exit codes:
    0: Success
    2: Unknown command or unusable target
    3: No branch matched the input
    4: An assert_condition() action failed
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from typing import Any

from .errors import NoMatchError, RuleAssertionError, RuleDefinitionError
from .nodes import Node
from .policies import ONCE, REPEAT
from .tree import Tree, TreeCompiler

logger = logging.getLogger(__name__)


def _load_target(ref: str) -> Any:
    """Import ``module:attr`` and return the attribute.

    Raises:
        RuleDefinitionError: If the reference is malformed or cannot be
            resolved.
    """
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise RuleDefinitionError(f"target must look like 'module:attr', got '{ref}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RuleDefinitionError(f"cannot import '{module_name}': {exc}") from exc
    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise RuleDefinitionError(f"'{ref}' has no attribute '{part}'") from exc
    return obj


def _build_tree(ref: str, *, repeat: bool = False) -> Tree:
    target = _load_target(ref)
    logger.debug("loaded %s from %s", type(target).__name__, ref)
    if isinstance(target, Tree):
        if repeat:
            raise RuleDefinitionError(f"'{ref}' is already compiled; --repeat only applies to Node targets")
        return target
    if isinstance(target, Node):
        return TreeCompiler(default_policy=REPEAT if repeat else ONCE).compile(target)
    raise RuleDefinitionError(f"'{ref}' is a {type(target).__name__}, expected a Node or Tree")


def _cmd_describe(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="ruletree describe")
    p.add_argument("target", help="Rule location as module:attr")
    args = p.parse_args(argv)

    try:
        tree = _build_tree(args.target)
    except RuleDefinitionError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    sys.stdout.write(tree.describe())
    return 0


def _cmd_run(argv: list[str]) -> int:
    """Execute the 'run' command.

    Args:
        argv: Command-line arguments after 'run'.

    Returns:
        int: Exit code (0 on success, 3 on no match, 4 on failed assert).
    """
    p = argparse.ArgumentParser(prog="ruletree run")
    p.add_argument("target", help="Rule location as module:attr")
    p.add_argument("--input", required=True, help="Inline JSON payload")
    p.add_argument(
        "--repeat",
        action="store_true",
        help="Compile a Node target with the repeat policy (rejected for compiled Trees)",
    )
    args = p.parse_args(argv)

    try:
        tree = _build_tree(args.target, repeat=args.repeat)
    except RuleDefinitionError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    payload = json.loads(args.input)

    try:
        tree.run(payload)
    except NoMatchError as exc:
        print(f"no match: {exc}")
        return 3
    except RuleAssertionError as exc:
        print(f"assertion failed: {exc}")
        return 4
    print("ok")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ruletree CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        int: Exit code.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    log_level = "WARNING"
    if argv and argv[0].startswith("--log-level="):
        log_level = argv.pop(0).split("=", 1)[1]
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if not argv or argv[0] in {"-h", "--help"}:
        print(
            "Usage: ruletree [--log-level=LEVEL] <command> [args]\n\n"
            "Commands:\n  describe\n  run"
        )
        return 0

    cmd, rest = argv[0], argv[1:]
    if cmd == "describe":
        return _cmd_describe(rest)
    if cmd == "run":
        return _cmd_run(rest)

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
