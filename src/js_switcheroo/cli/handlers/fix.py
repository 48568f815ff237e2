"""
Fix Command Handler.

Applies the auto-fixes of all active rules to a file or directory, in place, or
prints them as a unified diff with ``--dry-run``.
"""

import difflib
from pathlib import Path
from typing import Any, Dict, Optional

from rich.syntax import Syntax

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.hooks import check_rule_settings
from js_switcheroo.cli.handlers.files import EnginePool, collect_sources
from js_switcheroo.cli.handlers.lint import read_source, render_diagnostics
from js_switcheroo.utils.console import console, log_error, log_info, log_success, log_warning


def unified_diff(before: str, after: str, path: str) -> str:
  return "".join(
    difflib.unified_diff(
      before.splitlines(keepends=True),
      after.splitlines(keepends=True),
      fromfile=f"a/{path}",
      tofile=f"b/{path}",
    )
  )


def handle_fix(
  input_path: Path,
  ruleset: str = "auto",
  version: Optional[str] = None,
  dry_run: bool = False,
  rule_settings: Optional[Dict[str, Any]] = None,
) -> int:
  """
  Handles the 'fix' command execution.

  Args:
      input_path: File or directory to migrate.
      ruleset: One of ``auto``, ``admin``, ``storefront``, ``all``.
      version: Platform version override.
      dry_run: Print diffs instead of writing files.
      rule_settings: Rule configuration from ``--config``.

  Returns:
      int: 1 if error-severity findings remain or a file failed, else 0.
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = RuntimeConfig.load(version=version, rule_settings=rule_settings, search_path=input_path)
    check_rule_settings(config)
  except ValueError as e:
    log_error(f"Invalid configuration: {e}")
    return 1
  files = collect_sources(input_path)
  if not files:
    log_warning(f"No script files found in {input_path}")
    return 0
  log_info(f"Migrating {len(files)} files from [path]{input_path}[/path]...")

  pool = EnginePool(config, ruleset)
  changed = 0
  failed = False
  for path in files:
    original = read_source(path)
    result = pool.for_path(path).fix(original, path=str(path))
    if not result.success:
      log_error(f"[path]{path}[/path]: {'; '.join(result.errors)}")
      failed = True
      continue
    for error in result.errors:
      log_warning(f"[path]{path}[/path]: {error}")

    if result.code != original:
      changed += 1
      if dry_run:
        console.print(Syntax(unified_diff(original, result.code, str(path)), "diff", theme="ansi_dark"))
      else:
        with open(path, "wt", encoding="utf-8") as f:
          f.write(result.code)
        log_success(f"Migrated [path]{path}[/path] ({result.fixes_applied} fixes)")

    if result.diagnostics:
      render_diagnostics(result, f"{path} (remaining)")
    if result.error_count:
      failed = True

  verb = "Would migrate" if dry_run else "Migrated"
  console.print(f"\n[bold]Summary:[/bold] {verb} {changed} of {len(files)} files.")
  return 1 if failed else 0
