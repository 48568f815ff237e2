"""
Binding Tracker.

Maintains, for one traversal of one source unit, the table of local names that are
known to alias a tracked global symbol. The same deprecated call can appear under
many local names (``Shopware.State``, ``State``, ``MyState``, ``this.client``), and
the shape matchers consult this table to recognise all of them.

Recognised binding forms:

1.  **Destructuring** of a tracked root: ``const { State } = Shopware`` or
    ``const { State: S } = Shopware``.
2.  **Assignment** of a member access: ``const S = Shopware.State`` or
    ``S = Shopware.State``.
3.  **Construction** of a tracked class: ``const c = new HttpClient()`` or
    ``this.c = new HttpClient()``.
4.  **Default import** from a tracked module: ``import Helper from 'src/helper'``.

The table is monotonic-until-rebind: a local name maps to at most one path and a
later binding of the same name replaces the earlier one from that point on. Entries
are never removed on scope exit; aliases over-approximate across sibling scopes.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from js_switcheroo.core.nodes import (
  AssignmentExpression,
  AssignmentPattern,
  Identifier,
  ImportDeclaration,
  ImportDefaultSpecifier,
  MemberExpression,
  NewExpression,
  Node,
  ObjectPattern,
  Property,
  ThisExpression,
  VariableDeclarator,
  property_key_name,
  static_property_name,
)
from js_switcheroo.enums import BindingForm


@dataclass(frozen=True)
class MemberPath:
  """A ``root.member`` global, e.g. ``Shopware.State``."""

  root: str
  member: str

  @property
  def path(self) -> str:
    return f"{self.root}.{self.member}"


@dataclass(frozen=True)
class ConstructedInstance:
  """Instances created with ``new <class_name>(...)``."""

  class_name: str

  @property
  def path(self) -> str:
    return f"new {self.class_name}"


@dataclass(frozen=True)
class ModuleImport:
  """The default export of a module, e.g. ``'src/helper/dom-access.helper'``."""

  module: str

  @property
  def path(self) -> str:
    return f"import {self.module}"


TrackedSymbol = Union[MemberPath, ConstructedInstance, ModuleImport]


@dataclass(frozen=True)
class BindingEntry:
  """
  A local name known to denote the same runtime value as a tracked global path.
  """

  local_name: str
  """Local identifier, or ``this.<name>`` for property-style aliases."""

  path: str
  """The tracked symbol path (see ``TrackedSymbol.path``)."""

  form: BindingForm

  shorthand: bool = False
  """True for ``{ State }`` destructuring, where key and local name coincide."""

  @property
  def is_property(self) -> bool:
    return self.local_name.startswith("this.")


def binding_key(node: Optional[Node]) -> Optional[str]:
  """
  Returns the table key for a binding target or receiver expression.

  ``foo`` -> ``'foo'``; ``this.foo`` -> ``'this.foo'``; anything else -> None.
  """
  if isinstance(node, Identifier):
    return node.name
  if isinstance(node, MemberExpression) and isinstance(node.object, ThisExpression):
    name = static_property_name(node)
    if name is not None and not node.computed:
      return f"this.{name}"
  return None


class BindingTracker:
  """
  Per-unit alias table, fed every node of the traversal through ``observe``.
  """

  def __init__(self, tracked: Iterable[TrackedSymbol] = ()):
    """
    Args:
        tracked: The symbols whose aliases should be recorded.
    """
    self._members: Dict[str, Dict[str, MemberPath]] = {}
    self._classes: Dict[str, ConstructedInstance] = {}
    self._modules: Dict[str, ModuleImport] = {}
    self._table: Dict[str, BindingEntry] = {}
    for symbol in tracked:
      self.track(symbol)

  def track(self, symbol: TrackedSymbol) -> None:
    """Registers an additional symbol to follow."""
    if isinstance(symbol, MemberPath):
      self._members.setdefault(symbol.root, {})[symbol.member] = symbol
    elif isinstance(symbol, ConstructedInstance):
      self._classes[symbol.class_name] = symbol
    elif isinstance(symbol, ModuleImport):
      self._modules[symbol.module] = symbol

  # --- Queries ---

  def lookup(self, local_name: str) -> Optional[BindingEntry]:
    return self._table.get(local_name)

  def resolve(self, node: Optional[Node], path: Optional[str] = None) -> Optional[BindingEntry]:
    """
    Returns the entry aliased by an expression (``foo`` or ``this.foo``).

    Args:
        node: The receiver expression.
        path: If given, only an entry for this tracked path is returned.
    """
    key = binding_key(node)
    if key is None:
      return None
    entry = self._table.get(key)
    if entry is None or (path is not None and entry.path != path):
      return None
    return entry

  def aliases_of(self, path: str) -> List[str]:
    return [name for name, entry in self._table.items() if entry.path == path]

  def entries(self) -> List[BindingEntry]:
    return list(self._table.values())

  # --- Traversal hook ---

  def observe(self, node: Node) -> None:
    """
    Inspects one node and records any binding it introduces.
    """
    if isinstance(node, VariableDeclarator):
      self._observe_declarator(node)
    elif isinstance(node, AssignmentExpression) and node.operator == "=":
      key = binding_key(node.left)
      if key is not None:
        self._bind_value(key, node.right)
    elif isinstance(node, ImportDeclaration):
      self._observe_import(node)

  def _bind(self, entry: BindingEntry) -> None:
    self._table[entry.local_name] = entry

  def _observe_declarator(self, node: VariableDeclarator) -> None:
    if isinstance(node.id, ObjectPattern):
      if isinstance(node.init, Identifier) and node.init.name in self._members:
        self._observe_destructuring(node.id, self._members[node.init.name])
    elif isinstance(node.id, Identifier):
      self._bind_value(node.id.name, node.init)

  def _observe_destructuring(self, pattern: ObjectPattern, members: Dict[str, MemberPath]) -> None:
    for prop in pattern.properties:
      if not isinstance(prop, Property):
        continue
      key = property_key_name(prop)
      if key is None or key not in members:
        continue
      local = prop.value
      if isinstance(local, AssignmentPattern):
        local = local.left
      if not isinstance(local, Identifier):
        # Nested pattern ({ State: { foo } }) does not alias the member itself.
        continue
      self._bind(BindingEntry(local.name, members[key].path, BindingForm.DESTRUCTURED, shorthand=prop.shorthand))

  def _bind_value(self, local_name: str, value: Optional[Node]) -> None:
    if isinstance(value, MemberExpression) and isinstance(value.object, Identifier):
      members = self._members.get(value.object.name)
      name = static_property_name(value)
      if members and name in members:
        self._bind(BindingEntry(local_name, members[name].path, BindingForm.ASSIGNED))
    elif isinstance(value, NewExpression) and isinstance(value.callee, Identifier):
      symbol = self._classes.get(value.callee.name)
      if symbol is not None:
        self._bind(BindingEntry(local_name, symbol.path, BindingForm.CONSTRUCTED))

  def _observe_import(self, node: ImportDeclaration) -> None:
    if node.source is None or not isinstance(node.source.value, str):
      return
    symbol = self._modules.get(node.source.value)
    if symbol is None:
      return
    for spec in node.specifiers:
      if isinstance(spec, ImportDefaultSpecifier) and spec.local is not None:
        self._bind(BindingEntry(spec.local.name, symbol.path, BindingForm.IMPORTED))
