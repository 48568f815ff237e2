"""
Migration Trace Logger.

Records the step-by-step execution of a migration run:
1. Lifecycle phases (parsing, traversal, fixing).
2. Rule matches (a shape was recognised at a location).
3. Applied and skipped fixes.

The output is a list of event dictionaries suitable for JSON serialization and is
attached to every `MigrationResult`.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  RULE_MATCH = "rule_match"
  FIX_APPLIED = "fix_applied"
  FIX_SKIPPED = "fix_skipped"
  ANALYSIS_WARNING = "analysis_warning"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records migration events. One instance per engine run.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g. 'Parsing'). Returns the phase id."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    if not self._active_phases:
      return
    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_match(self, rule_id: str, line: int, column: int, fixable: bool) -> None:
    self._log_simple(
      TraceEventType.RULE_MATCH,
      f"{rule_id} at {line}:{column}",
      {"rule": rule_id, "line": line, "column": column, "fixable": fixable},
    )

  def log_fix(self, start: int, end: int, before: str, after: str) -> None:
    self._log_simple(
      TraceEventType.FIX_APPLIED,
      f"Replaced [{start}, {end})",
      {"before": before, "after": after},
    )

  def log_skipped_fix(self, start: int, end: int, reason: str) -> None:
    self._log_simple(TraceEventType.FIX_SKIPPED, f"Skipped [{start}, {end})", {"reason": reason})

  def log_warning(self, message: str) -> None:
    self._log_simple(TraceEventType.ANALYSIS_WARNING, message, {"level": "warning"})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  @property
  def events(self) -> List[TraceEvent]:
    return list(self._events)

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
