"""
Lint Command Handler.

Reports deprecated API usage without modifying files, either as a Rich table per
file or as ESLint-compatible JSON (``--json``).
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.table import Table

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.hooks import check_rule_settings
from js_switcheroo.core.migration_result import MigrationResult
from js_switcheroo.cli.handlers.files import EnginePool, collect_sources
from js_switcheroo.enums import Severity
from js_switcheroo.utils.console import console, log_error, log_info, log_success, log_warning


def read_source(path: Path) -> str:
  with open(path, "rt", encoding="utf-8") as f:
    return f.read()


def render_diagnostics(result: MigrationResult, title: str) -> None:
  """
  Prints the findings of one file as a table.
  """
  table = Table(title=title, title_justify="left")
  table.add_column("Line", justify="right", style="cyan")
  table.add_column("Severity")
  table.add_column("Message")
  table.add_column("Rule", style="rule")
  table.add_column("Fix", justify="center")

  for diagnostic in result.diagnostics:
    severity = "[error]error[/error]" if diagnostic.severity is Severity.ERROR else "[warning]warning[/warning]"
    table.add_row(
      f"{diagnostic.line}:{diagnostic.column}",
      severity,
      diagnostic.message,
      diagnostic.rule_id,
      "✔" if diagnostic.fixable else "",
    )
  console.print(table)


def handle_lint(
  input_path: Path,
  ruleset: str = "auto",
  version: Optional[str] = None,
  as_json: bool = False,
  rule_settings: Optional[Dict[str, Any]] = None,
) -> int:
  """
  Handles the 'lint' command execution.

  Args:
      input_path: File or directory to check.
      ruleset: One of ``auto``, ``admin``, ``storefront``, ``all``.
      version: Platform version override.
      as_json: Print ESLint JSON instead of tables.
      rule_settings: Rule configuration from ``--config``.

  Returns:
      int: 1 if any error-severity finding or parse failure occurred, else 0.
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
  if not as_json:
    log_info(f"Checking {len(files)} files from [path]{input_path}[/path]...")

  pool = EnginePool(config, ruleset)
  results: List[MigrationResult] = []
  for path in files:
    result = pool.for_path(path).run(read_source(path), path=str(path))
    results.append(result)
    if as_json:
      continue
    if not result.success:
      log_error(f"[path]{path}[/path]: {'; '.join(result.errors)}")
    elif result.diagnostics:
      render_diagnostics(result, str(path))

  failed = any(not r.success or r.error_count for r in results)
  if as_json:
    print(json.dumps([r.to_eslint() for r in results], indent=2))
    return 1 if failed else 0

  total = sum(len(r.diagnostics) for r in results)
  fixable = sum(r.fixable_count for r in results)
  if total == 0 and not failed:
    log_success(f"No deprecated usage found in {len(files)} files.")
  else:
    console.print(f"\n[bold]Summary:[/bold] {total} problems ({fixable} fixable) in {len(files)} files.")
  return 1 if failed else 0
