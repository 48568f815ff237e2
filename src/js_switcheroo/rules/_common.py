"""
Shared helpers of the rule packs.
"""

from typing import List, Optional, Set, Tuple

from js_switcheroo.analysis.bindings import binding_key
from js_switcheroo.core.diagnostics import Diagnostic
from js_switcheroo.core.hooks import MigrationRule
from js_switcheroo.core.nodes import (
  Identifier,
  ImportDeclaration,
  ImportSpecifier,
  MemberExpression,
  Node,
  Program,
  Property,
  ThisExpression,
  walk,
)

Span = Tuple[int, int]


def import_source(node: Node) -> Optional[str]:
  """The module string of an import declaration, or None."""
  if isinstance(node, ImportDeclaration) and node.source is not None and isinstance(node.source.value, str):
    return node.source.value
  return None


def _contains(outer: Span, inner: Span) -> bool:
  return outer[0] <= inner[0] and inner[1] <= outer[1]


def _is_reference(node: Node) -> bool:
  """
  True for an identifier in expression position (not a property name or key).
  """
  parent = node.parent
  if isinstance(parent, MemberExpression) and parent.property is node and not parent.computed:
    return False
  if isinstance(parent, Property) and parent.key is node and not parent.shorthand and not parent.computed:
    return False
  if isinstance(parent, ImportSpecifier) and parent.imported is node and parent.local is not node:
    return False
  return True


def bound_names(pattern: Node) -> Set[str]:
  """Names a destructuring pattern binds, e.g. ``{ a, b: c, ...d }`` -> a, c, d."""
  return {node.name for node in walk(pattern) if isinstance(node, Identifier) and _is_reference(node)}


class RetiringRule(MigrationRule):
  """
  Base of rules that rewrite every use of a name and then delete the statement
  that introduced it (an import, a ``new`` assignment).

  The finding is reported when the statement is visited. Its deletion fix is
  attached after the walk, and only when every remaining reference to the retired
  names is the receiver of a call rewritten in the same pass. Otherwise the
  finding stays advisory and the deletion is retried on the next pass.
  """

  def __init__(self, context):
    super().__init__(context)
    self._program: Optional[Program] = None
    self._names: Set[str] = set()
    self._retired: List[Tuple[Node, Diagnostic]] = []
    self._consumed: List[Span] = []
    self._rewritten: List[Span] = []

  def visit_Program(self, node: Program) -> None:
    self._program = node

  def retire(self, node: Node, message: str, *names: str) -> None:
    """Reports ``node`` and schedules its deletion once ``names`` are no longer referenced."""
    self._retired.append((node, self.report(node, message)))
    self._names.update(names)

  def consume(self, call: Node, receiver: Node) -> bool:
    """
    Records that ``call`` is rewritten and its ``receiver`` disappears with it.

    Returns False when the call sits inside another rewritten call; the outer fix
    then carries it verbatim and it is rewritten on the next pass.
    """
    if any(_contains(span, call.span) for span in self._rewritten):
      return False
    self._rewritten.append(call.span)
    self._consumed.append(receiver.span)
    return True

  def _settled(self) -> bool:
    if self._program is None:
      return False
    retired_spans = [node.span for node, _ in self._retired]
    for node in walk(self._program):
      if isinstance(node, Identifier):
        if node.name not in self._names or not _is_reference(node):
          continue
      elif isinstance(node, MemberExpression) and isinstance(node.object, ThisExpression):
        if binding_key(node) not in self._names:
          continue
      else:
        continue
      if node.span in self._consumed:
        continue
      if any(_contains(span, node.span) for span in retired_spans):
        continue
      return False
    return True

  def finish(self) -> None:
    if not self._retired or not self._settled():
      return
    synthesizer = self.context.synthesizer
    for node, diagnostic in self._retired:
      diagnostic.fix = synthesizer.statement_deletion(node)
