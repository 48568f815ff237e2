"""
Rules Command Handler: lists the registered rules.
"""

from rich.table import Table

from js_switcheroo.core.hooks import all_rules
from js_switcheroo.utils.console import console


def handle_rules() -> int:
  table = Table(title="Migration Rules")
  table.add_column("Rule", style="rule")
  table.add_column("Min. Version", justify="center")
  table.add_column("Fixable", justify="center")
  table.add_column("Description")

  for rule_cls in sorted(all_rules(), key=lambda cls: cls.meta.rule_id):
    meta = rule_cls.meta
    table.add_row(meta.rule_id, meta.min_version or "-", "✔" if meta.fixable else "", meta.description)

  console.print(table)
  return 0
