"""
Textual Fixer.

Splices the fixes of one lint pass into the original text. Fixes are applied in
offset order; a fix overlapping one already accepted in the same pass is skipped
and left for the next pass (the engine re-parses and re-lints between passes).
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.tracer import TraceLogger

logger = logging.getLogger(__name__)


@dataclass
class FixOutcome:
  text: str
  applied: List[Fix] = field(default_factory=list)
  skipped: List[Fix] = field(default_factory=list)


def apply_fixes(text: str, fixes: Iterable[Fix], tracer: Optional[TraceLogger] = None) -> FixOutcome:
  """
  Applies non-overlapping fixes to ``text``.

  Args:
      text: The text the fix offsets refer to.
      fixes: Candidate fixes, in any order.
      tracer: Optional trace sink.

  Returns:
      FixOutcome: The new text and which fixes were applied or skipped.
  """
  accepted: List[Fix] = []
  skipped: List[Fix] = []
  # Stable sort keeps emission order for fixes starting at the same offset.
  for fix in sorted(fixes, key=lambda f: (f.start, f.end)):
    if fix.end > len(text) or fix.start > fix.end:
      logger.debug(f"Dropping out-of-range fix [{fix.start}, {fix.end})")
      skipped.append(fix)
      continue
    if any(fix.overlaps(other) or (fix.start == fix.end == other.start) for other in accepted):
      skipped.append(fix)
      if tracer:
        tracer.log_skipped_fix(fix.start, fix.end, "overlaps an earlier fix")
      continue
    accepted.append(fix)

  parts = []
  cursor = 0
  for fix in accepted:
    parts.append(text[cursor : fix.start])
    parts.append(fix.text)
    if tracer:
      tracer.log_fix(fix.start, fix.end, text[fix.start : fix.end], fix.text)
    cursor = fix.end
  parts.append(text[cursor:])
  return FixOutcome(text="".join(parts), applied=accepted, skipped=skipped)
