"""
Data structures representing the output of a migration run.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from js_switcheroo.core.diagnostics import Diagnostic
from js_switcheroo.enums import Severity


class MigrationResult(BaseModel):
  """
  Container for the results of linting or fixing one source unit.
  """

  path: Optional[str] = Field(default=None, description="Display path of the source unit.")
  code: str = Field(default="", description="The source text after fixing (the input text when linting).")
  diagnostics: List[Diagnostic] = Field(default_factory=list, description="Findings, in traversal order.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(
    default=True,
    description="True if the pipeline completed without fatal errors.",
  )
  fixes_applied: int = Field(default=0, description="Number of fixes spliced into the code.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0

  @property
  def error_count(self) -> int:
    """Number of error-severity diagnostics."""
    return sum(1 for d in self.diagnostics if d.severity is Severity.ERROR)

  @property
  def warning_count(self) -> int:
    return sum(1 for d in self.diagnostics if d.severity is Severity.WARNING)

  @property
  def fixable_count(self) -> int:
    return sum(1 for d in self.diagnostics if d.fixable)

  def to_eslint(self) -> Dict[str, Any]:
    """
    Renders the result as one entry of ESLint's JSON formatter output.
    """
    messages = [d.to_eslint() for d in self.diagnostics]
    for error in self.errors:
      messages.append({"ruleId": None, "fatal": True, "severity": Severity.ERROR.level, "message": error})
    return {
      "filePath": self.path or "<input>",
      "messages": messages,
      "errorCount": self.error_count + len(self.errors),
      "warningCount": self.warning_count,
      "fixableErrorCount": sum(1 for d in self.diagnostics if d.fixable and d.severity is Severity.ERROR),
      "fixableWarningCount": sum(1 for d in self.diagnostics if d.fixable and d.severity is Severity.WARNING),
    }
