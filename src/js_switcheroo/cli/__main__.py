"""
Main Entry Point for the js-switcheroo CLI.

This module handles argument parsing and dispatches to the command handlers in
`js_switcheroo.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from js_switcheroo import __version__
from js_switcheroo.cli import handlers
from js_switcheroo.cli.handlers.files import RULESET_CHOICES
from js_switcheroo.config import parse_cli_key_values
from js_switcheroo.utils.console import set_verbose


def _add_common_arguments(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument("path", type=Path, help="Input source file or directory")
  cmd.add_argument(
    "--ruleset",
    choices=RULESET_CHOICES,
    default="auto",
    help="Rule pack to apply (default: auto, chosen from the path)",
  )
  cmd.add_argument(
    "--shopware-version",
    default=None,
    help="Target platform version (default: $SHOPWARE_VERSION or pyproject.toml)",
  )
  cmd.add_argument(
    "--config",
    nargs="*",
    help="Rule configuration flags in key=value format (e.g. store_root=Shopware)",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="js-switcheroo: Shopware extension JavaScript migrations")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: LINT ---
  cmd_lint = subparsers.add_parser("lint", help="Report deprecated API usage")
  _add_common_arguments(cmd_lint)
  cmd_lint.add_argument("--json", action="store_true", help="Print ESLint-compatible JSON")

  # --- Command: FIX ---
  cmd_fix = subparsers.add_parser("fix", help="Rewrite deprecated API usage in place")
  _add_common_arguments(cmd_fix)
  cmd_fix.add_argument("--dry-run", action="store_true", help="Print a diff without writing to disk")

  # --- Command: RULES ---
  subparsers.add_parser("rules", help="List available rules")

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "lint":
    settings = parse_cli_key_values(args.config)
    return handlers.handle_lint(args.path, args.ruleset, args.shopware_version, args.json, settings)

  elif args.command == "fix":
    settings = parse_cli_key_values(args.config)
    return handlers.handle_fix(args.path, args.ruleset, args.shopware_version, args.dry_run, settings)

  elif args.command == "rules":
    return handlers.handle_rules()

  return 0


if __name__ == "__main__":
  sys.exit(main())
