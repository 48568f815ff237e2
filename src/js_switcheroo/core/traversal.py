"""
Host traversal.

Visits every node of a parsed unit exactly once, depth-first and in pre-order. At
each node the binding tracker observes first, then every rule's
``visit_<Kind>`` handler runs, in rule order. After the walk each rule's
``finish`` runs once.
"""

from typing import Callable, Dict, List, Sequence

from js_switcheroo.analysis.bindings import BindingTracker
from js_switcheroo.core.hooks import MigrationRule
from js_switcheroo.core.nodes import Node, walk

Handler = Callable[[Node], None]


class Traversal:
  """
  Dispatches nodes to rule handlers by node kind.
  """

  def __init__(self, bindings: BindingTracker, rules: Sequence[MigrationRule]):
    self.bindings = bindings
    self.rules = list(rules)
    self._handlers: Dict[str, List[Handler]] = {}

  def handlers_for(self, kind: str) -> List[Handler]:
    if kind not in self._handlers:
      method = f"visit_{kind}"
      self._handlers[kind] = [getattr(rule, method) for rule in self.rules if hasattr(rule, method)]
    return self._handlers[kind]

  def run(self, root: Node) -> int:
    """
    Walks ``root``; returns the number of visited nodes.
    """
    count = 0
    for node in walk(root):
      count += 1
      self.bindings.observe(node)
      for handler in self.handlers_for(node.kind):
        handler(node)
    for rule in self.rules:
      rule.finish()
    return count
