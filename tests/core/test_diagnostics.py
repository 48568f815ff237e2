"""
Tests for Diagnostics, Fixes and the Emitter.
"""

import pytest
from pydantic import ValidationError

from js_switcheroo.core.diagnostics import Diagnostic, DiagnosticEmitter, Fix
from js_switcheroo.core.migration_result import MigrationResult
from js_switcheroo.core.nodes import Identifier
from js_switcheroo.core.source import SourceUnit, detect_indent
from js_switcheroo.enums import Severity


def test_source_unit_positions():
  unit = SourceUnit("a;\n  b;\n")

  assert unit.position(0) == (1, 1)
  assert unit.position(5) == (2, 3)
  assert unit.line_start(5) == 3
  assert unit.line_end(5) == 7
  assert unit.line_indent(5) == "  "


@pytest.mark.parametrize(
  "text, expected",
  [
    ("a {\n  b {\n    c;\n  }\n}\n", "  "),
    ("a {\n    b;\n}\n", "    "),
    ("a {\n\tb {\n\t\tc;\n\t}\n}\n", "\t"),
    ("/**\n * doc\n */\nf({\n  x: 1,\n});\n", "  "),
    ("a;\nb;\n", None),
  ],
)
def test_detect_indent(text, expected):
  assert detect_indent(text) == expected
  assert SourceUnit(text).indent_style == expected


def test_emitter_preserves_order_and_positions():
  unit = SourceUnit("a;\n  bb;\n")
  emitter = DiagnosticEmitter(unit)

  second = emitter.emit("r/two", Identifier(5, 7, name="bb"), "second")
  first = emitter.emit("r/one", (0, 1), "first", severity=Severity.WARNING)

  assert emitter.diagnostics == [second, first]
  assert (second.line, second.column, second.end_line, second.end_column) == (2, 3, 2, 5)
  assert first.severity is Severity.WARNING
  assert not first.fixable


def test_fix_helpers():
  node = Identifier(3, 8, name="State")

  assert Fix.replace(node, "Store") == Fix(start=3, end=8, text="Store")
  assert Fix.remove(node).is_deletion
  assert Fix(start=0, end=4).overlaps(Fix(start=3, end=6))
  assert not Fix(start=0, end=3).overlaps(Fix(start=3, end=6))


def test_fix_rejects_negative_offsets():
  with pytest.raises(ValidationError):
    Fix(start=-1, end=2)


def test_diagnostic_to_eslint():
  diagnostic = Diagnostic(
    rule_id="shopware-admin/no-shopware-store",
    message="msg",
    start=8,
    end=13,
    line=1,
    column=9,
    end_line=1,
    end_column=14,
    fix=Fix(start=8, end=13, text="Store"),
  )
  data = diagnostic.to_eslint()

  assert data["ruleId"] == "shopware-admin/no-shopware-store"
  assert data["severity"] == 2
  assert data["fix"] == {"range": [8, 13], "text": "Store"}
  assert (data["line"], data["column"]) == (1, 9)


def test_severity_levels():
  assert Severity.ERROR.level == 2
  assert Severity.WARNING.level == 1


def test_result_counts_and_eslint_shape():
  error = Diagnostic(rule_id="a", message="e", start=0, end=1, fix=Fix(start=0, end=1, text="x"))
  warning = Diagnostic(rule_id="b", message="w", start=0, end=1, severity=Severity.WARNING)
  result = MigrationResult(path="plugin.js", diagnostics=[error, warning], errors=["Parse Error: boom"])

  assert result.has_errors
  assert (result.error_count, result.warning_count, result.fixable_count) == (1, 1, 1)

  data = result.to_eslint()
  assert data["filePath"] == "plugin.js"
  assert data["errorCount"] == 2
  assert data["warningCount"] == 1
  assert data["fixableErrorCount"] == 1
  assert data["messages"][-1]["fatal"] is True
