"""
Exception types raised by the migration engine.

Absence of a match is never an error; these cover the two ways a source unit can
fail to be processed: it does not parse, or a fix cannot be rendered to text.
"""

from typing import Optional


class SwitcherooError(Exception):
  """Base class for engine errors."""


class SourceParseError(SwitcherooError):
  """
  Raised when a source unit contains syntax errors.

  Attributes:
      line: 1-based line of the first error, if known.
      column: 1-based column of the first error, if known.
  """

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
    super().__init__(message)
    self.line = line
    self.column = column


class SynthesisError(SwitcherooError):
  """
  Raised by the rewrite synthesizer when a required sub-node is structurally absent.
  The finding is then reported without a fix.
  """
