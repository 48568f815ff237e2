"""
Source Unit text access.

Holds the original text of one source unit and answers the positional questions
the rest of the engine asks: the verbatim text of a node, the 1-based line/column of
an offset, the leading whitespace of the line containing an offset and the
indentation step the file is written with.
"""

import bisect
from collections import Counter
from typing import List, Optional, Tuple

from js_switcheroo.core.nodes import Node


def detect_indent(text: str) -> Optional[str]:
  """
  Guesses the indentation step of ``text``: a tab, or the most frequent increase of
  leading spaces between consecutive non-blank lines. Returns None when the text
  has no nested lines.
  """
  steps: Counter = Counter()
  tab_lines = 0
  previous = 0
  for line in text.split("\n"):
    content = line.lstrip(" \t")
    if not content or content.startswith("*"):
      # Blank lines and block comment continuations.
      continue
    leading = line[: len(line) - len(content)]
    if leading.startswith("\t"):
      tab_lines += 1
      continue
    width = len(leading)
    if width > previous:
      steps[width - previous] += 1
    previous = width

  if tab_lines and tab_lines >= sum(steps.values()):
    return "\t"
  if not steps:
    return None
  return " " * steps.most_common(1)[0][0]


class SourceUnit:
  """
  Immutable view over the text of a single file.
  """

  def __init__(self, text: str, path: Optional[str] = None):
    """
    Args:
        text: Full source text.
        path: Optional display path for messages.
    """
    self.text = text
    self.path = path
    self._indent_style: Optional[str] = None
    self._indent_detected = False
    self._line_starts: List[int] = [0]
    for index, char in enumerate(text):
      if char == "\n":
        self._line_starts.append(index + 1)

  def slice(self, start: int, end: int) -> str:
    return self.text[start:end]

  def node_text(self, node: Node) -> str:
    """Returns the exact original text of ``node``."""
    return self.text[node.start : node.end]

  def position(self, offset: int) -> Tuple[int, int]:
    """
    Converts a character offset to a 1-based (line, column) pair.
    """
    line_index = bisect.bisect_right(self._line_starts, offset) - 1
    return line_index + 1, offset - self._line_starts[line_index] + 1

  def line_start(self, offset: int) -> int:
    """Offset of the first character on the line containing ``offset``."""
    return self._line_starts[bisect.bisect_right(self._line_starts, offset) - 1]

  def line_end(self, offset: int) -> int:
    """Offset of the newline ending the line containing ``offset`` (or EOF)."""
    end = self.text.find("\n", offset)
    return len(self.text) if end == -1 else end

  def line_indent(self, offset: int) -> str:
    """
    Returns the leading whitespace of the line containing ``offset``.
    """
    start = self.line_start(offset)
    cursor = start
    while cursor < len(self.text) and self.text[cursor] in " \t":
      cursor += 1
    return self.text[start:cursor]

  @property
  def indent_style(self) -> Optional[str]:
    """The indentation step used by the file, if one can be told."""
    if not self._indent_detected:
      self._indent_style = detect_indent(self.text)
      self._indent_detected = True
    return self._indent_style
