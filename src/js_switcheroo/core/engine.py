"""
Orchestration Engine for source migrations.

The `MigrationEngine` is the primary driver. For every source unit it:

1.  **Parses** the text with the tree-sitter adapter (`core.parser`).
2.  **Builds per-unit state**: a fresh `BindingTracker`, `RuleContext` (emitter,
    synthesizer) and one instance of every active rule. Nothing is shared between
    units.
3.  **Traverses** the tree once in pre-order, feeding the tracker and the rules'
    ``visit_<Kind>`` handlers (`core.traversal`).
4.  **Fixes** (``fix`` only): splices the non-overlapping fixes into the text,
    re-parses and repeats until no fix applies or ``max_fix_passes`` is reached.

Parse failures never propagate; they are returned as an unsuccessful
`MigrationResult`, so a batch run continues with the next unit.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from js_switcheroo.analysis.bindings import BindingTracker
from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.diagnostics import Diagnostic
from js_switcheroo.core.errors import SourceParseError
from js_switcheroo.core.fixer import apply_fixes
from js_switcheroo.core.hooks import RuleClass, RuleContext, get_rules
from js_switcheroo.core.migration_result import MigrationResult
from js_switcheroo.core.nodes import Program
from js_switcheroo.core.parser import language_for_path, parse_source
from js_switcheroo.core.source import SourceUnit
from js_switcheroo.core.tracer import TraceLogger
from js_switcheroo.core.traversal import Traversal

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "javascript"


class MigrationEngine:
  """
  Lints and fixes source units with the rules active for a configuration.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, rules: Optional[Sequence[RuleClass]] = None):
    """
    Args:
        config: Runtime configuration. Loaded from the environment if None.
        rules: Explicit rule classes; defaults to the registered rules selected by
            the config's rulesets, version and disabled rules.
    """
    self.config = config or RuntimeConfig.load()
    if rules is not None:
      self.rules = list(rules)
    else:
      self.rules = get_rules(self.config.rulesets, self.config.version, self.config.disabled_rules)

  @staticmethod
  def resolve_language(path: Optional[str], language: Optional[str]) -> str:
    if language:
      return language
    if path:
      return language_for_path(Path(path)) or DEFAULT_LANGUAGE
    return DEFAULT_LANGUAGE

  def parse(self, code: str, language: str = DEFAULT_LANGUAGE) -> Program:
    return parse_source(code, language)

  def lint_unit(self, code: str, path: Optional[str], language: str, tracer: TraceLogger) -> List[Diagnostic]:
    """
    Runs one traversal over ``code``.

    Raises:
        SourceParseError: If the code does not parse.
    """
    tracer.start_phase("Parsing", path or "<input>")
    try:
      program = self.parse(code, language)
    finally:
      tracer.end_phase()

    source = SourceUnit(code, path)
    context = RuleContext(source, self.config, BindingTracker(), tracer)
    instances = [rule_cls(context) for rule_cls in self.rules]
    for rule in instances:
      for symbol in rule.tracked_symbols():
        context.bindings.track(symbol)

    tracer.start_phase("Traversal", f"{len(instances)} rules")
    visited = Traversal(context.bindings, instances).run(program)
    tracer.end_phase()
    logger.debug(f"{path or '<input>'}: {visited} nodes, {len(context.diagnostics)} findings")
    return list(context.diagnostics)

  def run(self, code: str, path: Optional[str] = None, language: Optional[str] = None) -> MigrationResult:
    """
    Lints a source unit without modifying it.

    Args:
        code: Source text.
        path: Optional display path; also selects the grammar by suffix.
        language: Explicit grammar name (overrides ``path``).

    Returns:
        MigrationResult: Findings in traversal order; ``code`` is the input text.
    """
    tracer = TraceLogger()
    language = self.resolve_language(path, language)
    try:
      diagnostics = self.lint_unit(code, path, language, tracer)
    except SourceParseError as e:
      return self._parse_failure(code, path, e, tracer)
    return MigrationResult(path=path, code=code, diagnostics=diagnostics, trace_events=tracer.export())

  def fix(self, code: str, path: Optional[str] = None, language: Optional[str] = None) -> MigrationResult:
    """
    Applies fixes to a fix-point and reports what remains.

    Returns:
        MigrationResult: ``code`` holds the fixed text and ``diagnostics`` the
        findings still present in it.
    """
    tracer = TraceLogger()
    language = self.resolve_language(path, language)
    try:
      diagnostics = self.lint_unit(code, path, language, tracer)
    except SourceParseError as e:
      return self._parse_failure(code, path, e, tracer)

    text = code
    applied = 0
    errors: List[str] = []
    for pass_no in range(1, self.config.max_fix_passes + 1):
      fixes = [d.fix for d in diagnostics if d.fix is not None]
      if not fixes:
        break

      tracer.start_phase("Fixing", f"pass {pass_no}")
      outcome = apply_fixes(text, fixes, tracer)
      tracer.end_phase()
      if not outcome.applied or outcome.text == text:
        break

      try:
        diagnostics = self.lint_unit(outcome.text, path, language, tracer)
      except SourceParseError as e:
        msg = f"Fix pass {pass_no} produced unparsable code ({e}); keeping the previous text"
        logger.warning(msg)
        tracer.log_warning(msg)
        errors.append(msg)
        break
      text = outcome.text
      applied += len(outcome.applied)
    else:
      logger.debug(f"{path or '<input>'}: stopped after {self.config.max_fix_passes} fix passes")

    return MigrationResult(
      path=path,
      code=text,
      diagnostics=diagnostics,
      errors=errors,
      fixes_applied=applied,
      trace_events=tracer.export(),
    )

  def _parse_failure(
    self, code: str, path: Optional[str], error: SourceParseError, tracer: TraceLogger
  ) -> MigrationResult:
    tracer.log_warning(str(error))
    return MigrationResult(
      path=path,
      code=code,
      errors=[f"Parse Error: {error}"],
      success=False,
      trace_events=tracer.export(),
    )


def lint_code(code: str, config: Optional[RuntimeConfig] = None, path: Optional[str] = None) -> MigrationResult:
  """Convenience wrapper: lint one string."""
  return MigrationEngine(config).run(code, path=path)


def fix_code(code: str, config: Optional[RuntimeConfig] = None, path: Optional[str] = None) -> Tuple[str, MigrationResult]:
  """Convenience wrapper: fix one string; returns (fixed text, result)."""
  result = MigrationEngine(config).fix(code, path=path)
  return result.code, result
