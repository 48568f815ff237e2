"""
Rule Registry, Rule Context, and Dynamic Loader.

Migration rules are classes registered with the `register_rule` decorator. During a
run the engine instantiates every active rule with a `RuleContext` and the host
traversal calls the rule's ``visit_<Kind>`` handlers (``visit_CallExpression``,
``visit_VariableDeclarator``, ...) for each node of that kind, in pre-order.

Rules read configuration through `RuleContext.validate_settings`, consult aliases
through `RuleContext.bindings` and report findings through `MigrationRule.report`.
"""

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Callable, ClassVar, Dict, Iterable, List, Optional, Set, Type, TypeVar, Union

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import BindingTracker, TrackedSymbol
from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.diagnostics import Anchor, Diagnostic, DiagnosticEmitter, Fix
from js_switcheroo.core.errors import SynthesisError
from js_switcheroo.core.nodes import Node
from js_switcheroo.core.source import SourceUnit
from js_switcheroo.core.synthesizer import RewriteSynthesizer
from js_switcheroo.core.tracer import TraceLogger
from js_switcheroo.core.versioning import is_active
from js_switcheroo.enums import Ruleset, Severity

T = TypeVar("T", bound=BaseModel)

FixFactory = Callable[[], Fix]

logger = logging.getLogger(__name__)


class RuleMeta(BaseModel):
  """
  Registration metadata of a rule.
  """

  name: str = Field(..., description="Rule name within its pack, e.g. 'no-shopware-store'.")
  ruleset: Ruleset
  description: str = ""
  min_version: Optional[str] = Field(None, description="Lowest platform version the rule applies to.")
  fixable: bool = False

  @property
  def rule_id(self) -> str:
    return f"shopware-{self.ruleset.value}/{self.name}"


class RuleContext:
  """
  Per-unit state shared by every rule of one traversal.

  Holds the source text, the binding table, the synthesizer and the emitter. A
  fresh context is built for every source unit.
  """

  def __init__(
    self,
    source: SourceUnit,
    config: RuntimeConfig,
    bindings: Optional[BindingTracker] = None,
    tracer: Optional[TraceLogger] = None,
  ):
    self.source = source
    self.config = config
    self.bindings = bindings or BindingTracker()
    self.synthesizer = RewriteSynthesizer(source)
    self.emitter = DiagnosticEmitter(source)
    self.tracer = tracer or TraceLogger()
    self._claimed: Set[int] = set()

  @property
  def diagnostics(self) -> List[Diagnostic]:
    return self.emitter.diagnostics

  def text(self, node: Node) -> str:
    return self.source.node_text(node)

  def validate_settings(self, model: Type[T]) -> T:
    """Validates the rule settings against a rule-specific Pydantic schema."""
    relevant_keys = model.model_fields.keys()
    subset = {k: v for k, v in self.config.rule_settings.items() if k in relevant_keys}
    return model.model_validate(subset)

  def claim(self, node: Node) -> None:
    """Marks a node as handled, so lower priority matches skip it."""
    self._claimed.add(id(node))

  def is_claimed(self, node: Node) -> bool:
    return id(node) in self._claimed

  def report(
    self,
    rule_id: str,
    anchor: Anchor,
    message: str,
    fix: Union[Fix, FixFactory, None] = None,
    severity: Severity = Severity.ERROR,
  ) -> Diagnostic:
    """
    Emits a diagnostic.

    ``fix`` may be a callable building the Fix; if it raises `SynthesisError` the
    finding is still reported, without a fix.
    """
    if callable(fix):
      try:
        fix = fix()
      except SynthesisError as e:
        logger.debug(f"{rule_id}: no fix generated ({e})")
        self.tracer.log_warning(f"{rule_id}: {e}")
        fix = None

    diagnostic = self.emitter.emit(rule_id, anchor, message, fix=fix, severity=severity)
    self.tracer.log_match(rule_id, diagnostic.line, diagnostic.column, diagnostic.fixable)
    return diagnostic


class MigrationRule:
  """
  Base class of all rules.

  Subclasses implement ``visit_<Kind>`` methods and may declare the symbols whose
  aliases they need (`tracked_symbols`) and a settings schema (`settings_model`).
  """

  meta: ClassVar[RuleMeta]
  settings_model: ClassVar[Optional[Type[BaseModel]]] = None

  def __init__(self, context: RuleContext):
    self.context = context
    self.settings = context.validate_settings(self.settings_model) if self.settings_model else None

  @property
  def rule_id(self) -> str:
    return self.meta.rule_id

  def tracked_symbols(self) -> List[TrackedSymbol]:
    return []

  def finish(self) -> None:
    """Called once after the traversal of a unit; may report further findings."""

  def report(
    self,
    anchor: Anchor,
    message: str,
    fix: Union[Fix, FixFactory, None] = None,
    severity: Severity = Severity.ERROR,
  ) -> Diagnostic:
    return self.context.report(self.rule_id, anchor, message, fix=fix, severity=severity)


RuleClass = Type[MigrationRule]

# Global Registry
_RULES: Dict[str, RuleClass] = {}
_RULES_LOADED = False


def register_rule(
  name: str,
  ruleset: Ruleset,
  min_version: Optional[str] = None,
  fixable: bool = False,
  description: str = "",
) -> Callable[[RuleClass], RuleClass]:
  """
  Decorator to register a MigrationRule subclass.

  Args:
      name: Rule name within its pack; the id becomes ``shopware-<pack>/<name>``.
      ruleset: The pack the rule belongs to.
      min_version: If set, the rule is disabled for lower configured versions.
      fixable: Whether the rule can produce fixes.
      description: One line shown by ``js-switcheroo rules``.
  """

  def decorator(cls: RuleClass) -> RuleClass:
    cls.meta = RuleMeta(
      name=name,
      ruleset=ruleset,
      description=description,
      min_version=min_version,
      fixable=fixable,
    )
    _RULES[cls.meta.rule_id] = cls
    return cls

  return decorator


def get_rule(rule_id: str) -> Optional[RuleClass]:
  """
  Retrieves a registered rule by id, loading the built-in rules on first use.
  """
  if not _RULES_LOADED:
    load_rules()
  return _RULES.get(rule_id)


def all_rules() -> List[RuleClass]:
  if not _RULES_LOADED:
    load_rules()
  return list(_RULES.values())


def get_rules(
  rulesets: Optional[Iterable[Ruleset]] = None,
  version: Optional[str] = None,
  disabled: Iterable[str] = (),
) -> List[RuleClass]:
  """
  Returns the registered rules that apply to a run, in registration order.

  Args:
      rulesets: Packs to include (all when None).
      version: Configured platform version; rules gated above it are dropped.
      disabled: Rule ids (or bare rule names) to exclude.
  """
  wanted = set(rulesets) if rulesets is not None else None
  skipped = set(disabled)
  selected = []
  for cls in all_rules():
    meta = cls.meta
    if wanted is not None and meta.ruleset not in wanted:
      continue
    if meta.rule_id in skipped or meta.name in skipped:
      continue
    if not is_active(meta.min_version, version):
      logger.debug(f"Rule {meta.rule_id} requires {meta.min_version}, configured {version}")
      continue
    selected.append(cls)
  return selected


def clear_rules() -> None:
  """Resets the internal rule registry. Primarily for testing."""
  global _RULES_LOADED
  _RULES.clear()
  _RULES_LOADED = False


def load_rules(extra_dirs: Optional[List[Path]] = None) -> int:
  """
  Imports the built-in rule packs and, optionally, rule files from directories.

  Args:
      extra_dirs: Additional directories whose ``*.py`` files register rules.

  Returns:
      int: Number of registered rules.
  """
  global _RULES_LOADED

  if not _RULES_LOADED:
    imported_before = "js_switcheroo.rules" in sys.modules
    import js_switcheroo.rules  # noqa: F401

    if imported_before:
      # Module import is cached; re-run the decorators after clear_rules().
      for module_name in sorted(sys.modules):
        if module_name.startswith("js_switcheroo.rules."):
          importlib.reload(sys.modules[module_name])
    _RULES_LOADED = True

  for directory in extra_dirs or []:
    if directory.exists() and directory.is_dir():
      _import_from_dir(directory)

  return len(_RULES)


def _import_from_dir(directory: Path) -> int:
  """Imports every python file of a directory as a standalone module."""
  count = 0
  for item in sorted(directory.glob("*.py")):
    if item.name == "__init__.py":
      continue
    unique_name = f"js_switcheroo_rule_{item.stem}_{item.stat().st_ino}"
    spec = importlib.util.spec_from_file_location(unique_name, item)
    if spec is None or spec.loader is None:
      continue
    mod = importlib.util.module_from_spec(spec)
    sys.modules[unique_name] = mod
    try:
      spec.loader.exec_module(mod)
    except Exception as e:
      logger.warning(f"Failed to load rule file {item.name}: {e}")
      del sys.modules[unique_name]
      continue
    count += 1
  return count


def check_rule_settings(config: RuntimeConfig, rules: Optional[Iterable[RuleClass]] = None) -> None:
  """
  Validates the configured rule settings against every rule's schema.

  Raises:
      ValueError: If a setting has the wrong type for a rule.
  """
  for rule_cls in rules if rules is not None else all_rules():
    if rule_cls.settings_model is None:
      continue
    try:
      config.parse_rule_settings(rule_cls.settings_model)
    except ValueError as e:
      raise ValueError(f"{rule_cls.meta.rule_id}: {e}")
