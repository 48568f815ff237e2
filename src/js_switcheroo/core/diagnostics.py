"""
Diagnostics and Fixes.

A `Diagnostic` is one reportable finding (location, message, optional `Fix`).
A `Fix` is a purely textual edit: replace ``[start, end)`` of the original source
with ``text`` (an empty ``text`` is a deletion). Fixes are never re-parsed here; the
fixer (`js_switcheroo.core.fixer`) splices them into the text.

The `DiagnosticEmitter` appends findings to an ordered list, one per match, in
traversal (pre-order) order.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from js_switcheroo.core.nodes import Node
from js_switcheroo.core.source import SourceUnit
from js_switcheroo.enums import Severity


class Fix(BaseModel):
  """
  A textual replacement of a span of the original source.
  """

  start: int = Field(..., ge=0, description="Start offset (inclusive).")
  end: int = Field(..., ge=0, description="End offset (exclusive).")
  text: str = Field(default="", description="Replacement text; empty for deletions.")

  @property
  def is_deletion(self) -> bool:
    return self.text == ""

  @classmethod
  def replace(cls, node: Node, text: str) -> "Fix":
    """Replaces the whole span of ``node``."""
    return cls(start=node.start, end=node.end, text=text)

  @classmethod
  def remove(cls, node: Node) -> "Fix":
    """Deletes the span of ``node``."""
    return cls(start=node.start, end=node.end, text="")

  def overlaps(self, other: "Fix") -> bool:
    return self.start < other.end and other.start < self.end

  def to_eslint(self) -> Dict[str, Any]:
    return {"range": [self.start, self.end], "text": self.text}


class Diagnostic(BaseModel):
  """
  A single finding reported by a rule.
  """

  rule_id: str = Field(..., description="Identifier of the reporting rule (e.g. 'shopware-admin/no-shopware-store').")
  message: str = Field(..., description="Human readable description.")
  severity: Severity = Field(default=Severity.ERROR)
  start: int = Field(..., description="Anchor start offset.")
  end: int = Field(..., description="Anchor end offset.")
  line: int = Field(1, description="1-based line of the anchor start.")
  column: int = Field(1, description="1-based column of the anchor start.")
  end_line: int = Field(1, description="1-based line of the anchor end.")
  end_column: int = Field(1, description="1-based column of the anchor end.")
  fix: Optional[Fix] = Field(default=None, description="Optional auto-fix; None means advisory only.")

  @property
  def fixable(self) -> bool:
    return self.fix is not None

  def to_eslint(self) -> Dict[str, Any]:
    """
    Renders the finding in the shape of an ESLint JSON formatter message.
    """
    data: Dict[str, Any] = {
      "ruleId": self.rule_id,
      "severity": self.severity.level,
      "message": self.message,
      "line": self.line,
      "column": self.column,
      "endLine": self.end_line,
      "endColumn": self.end_column,
    }
    if self.fix is not None:
      data["fix"] = self.fix.to_eslint()
    return data


Anchor = Union[Node, Tuple[int, int]]


class DiagnosticEmitter:
  """
  Collects diagnostics for one source unit, in emission order.
  """

  def __init__(self, source: SourceUnit):
    self._source = source
    self.diagnostics: List[Diagnostic] = []

  def emit(
    self,
    rule_id: str,
    anchor: Anchor,
    message: str,
    fix: Optional[Fix] = None,
    severity: Severity = Severity.ERROR,
  ) -> Diagnostic:
    """
    Packages a match into a Diagnostic and appends it to the output sequence.

    Args:
        rule_id: The reporting rule.
        anchor: Node or (start, end) span the finding points at.
        message: Human readable message.
        fix: Optional fix. None makes the finding advisory only.
        severity: Finding severity.

    Returns:
        The appended Diagnostic.
    """
    start, end = anchor.span if isinstance(anchor, Node) else anchor
    line, column = self._source.position(start)
    end_line, end_column = self._source.position(end)
    diagnostic = Diagnostic(
      rule_id=rule_id,
      message=message,
      severity=severity,
      start=start,
      end=end,
      line=line,
      column=column,
      end_line=end_line,
      end_column=end_column,
      fix=fix,
    )
    self.diagnostics.append(diagnostic)
    return diagnostic
