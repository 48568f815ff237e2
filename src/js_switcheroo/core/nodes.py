"""
Syntax Node Model.

A closed set of ESTree-shaped node classes produced by the parser adapter
(`js_switcheroo.core.parser`). Rules dispatch on the class name through
``visit_<ClassName>`` handlers, so the class names mirror the ESTree kinds that
ESLint rules are written against.

Every node carries ``start``/``end`` character offsets into the source unit and a
``parent`` back-reference. Children are declared per class in ``child_fields``, in
source order, which is what the traversal walks.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, List, Optional, Tuple


@dataclass(eq=False)
class Node:
  """
  Base class of all syntax nodes.
  """

  start: int
  end: int
  parent: Optional["Node"] = field(default=None, init=False, repr=False)

  child_fields: ClassVar[Tuple[str, ...]] = ()

  @property
  def kind(self) -> str:
    """The ESTree kind name (e.g. 'CallExpression')."""
    return type(self).__name__

  @property
  def span(self) -> Tuple[int, int]:
    """The (start, end) character offsets."""
    return (self.start, self.end)

  def children(self) -> Iterator["Node"]:
    """Yields direct children in source order."""
    for name in self.child_fields:
      value = getattr(self, name)
      if isinstance(value, Node):
        yield value
      elif isinstance(value, list):
        for item in value:
          if isinstance(item, Node):
            yield item


@dataclass(eq=False)
class Program(Node):
  body: List[Node] = field(default_factory=list)

  child_fields = ("body",)


@dataclass(eq=False)
class Identifier(Node):
  name: str = ""


@dataclass(eq=False)
class ThisExpression(Node):
  pass


@dataclass(eq=False)
class Literal(Node):
  """
  String, numeric, boolean, null and regex literals.

  ``value`` is the decoded Python value for strings (escape sequences resolved),
  ``raw`` the verbatim source text including quotes.
  """

  value: Any = None
  raw: str = ""

  @property
  def is_string(self) -> bool:
    return isinstance(self.value, str)


@dataclass(eq=False)
class MemberExpression(Node):
  object: Optional[Node] = None
  property: Optional[Node] = None
  computed: bool = False
  optional: bool = False

  child_fields = ("object", "property")


@dataclass(eq=False)
class CallExpression(Node):
  callee: Optional[Node] = None
  arguments: List[Node] = field(default_factory=list)
  optional: bool = False

  child_fields = ("callee", "arguments")


@dataclass(eq=False)
class NewExpression(Node):
  callee: Optional[Node] = None
  arguments: List[Node] = field(default_factory=list)

  child_fields = ("callee", "arguments")


@dataclass(eq=False)
class AssignmentExpression(Node):
  operator: str = "="
  left: Optional[Node] = None
  right: Optional[Node] = None

  child_fields = ("left", "right")


@dataclass(eq=False)
class VariableDeclaration(Node):
  declaration_kind: str = "var"
  declarations: List["VariableDeclarator"] = field(default_factory=list)

  child_fields = ("declarations",)


@dataclass(eq=False)
class VariableDeclarator(Node):
  id: Optional[Node] = None
  init: Optional[Node] = None

  child_fields = ("id", "init")


@dataclass(eq=False)
class ObjectPattern(Node):
  properties: List[Node] = field(default_factory=list)

  child_fields = ("properties",)


@dataclass(eq=False)
class ArrayPattern(Node):
  elements: List[Node] = field(default_factory=list)

  child_fields = ("elements",)


@dataclass(eq=False)
class AssignmentPattern(Node):
  left: Optional[Node] = None
  right: Optional[Node] = None

  child_fields = ("left", "right")


@dataclass(eq=False)
class RestElement(Node):
  argument: Optional[Node] = None

  child_fields = ("argument",)


@dataclass(eq=False)
class Property(Node):
  """
  Object literal member or object pattern member.

  For shorthand members (``{ State }``) key and value are two distinct
  ``Identifier`` nodes sharing the same span, as in ESTree.
  """

  key: Optional[Node] = None
  value: Optional[Node] = None
  computed: bool = False
  shorthand: bool = False
  method: bool = False

  child_fields = ("key", "value")


@dataclass(eq=False)
class ObjectExpression(Node):
  properties: List[Node] = field(default_factory=list)

  child_fields = ("properties",)


@dataclass(eq=False)
class ArrayExpression(Node):
  elements: List[Node] = field(default_factory=list)

  child_fields = ("elements",)


@dataclass(eq=False)
class SpreadElement(Node):
  argument: Optional[Node] = None

  child_fields = ("argument",)


@dataclass(eq=False)
class ArrowFunctionExpression(Node):
  params: List[Node] = field(default_factory=list)
  body: Optional[Node] = None
  expression: bool = False
  is_async: bool = False

  child_fields = ("params", "body")


@dataclass(eq=False)
class FunctionExpression(Node):
  id: Optional[Node] = None
  params: List[Node] = field(default_factory=list)
  body: Optional[Node] = None
  is_async: bool = False

  child_fields = ("id", "params", "body")


@dataclass(eq=False)
class FunctionDeclaration(Node):
  id: Optional[Node] = None
  params: List[Node] = field(default_factory=list)
  body: Optional[Node] = None
  is_async: bool = False

  child_fields = ("id", "params", "body")


@dataclass(eq=False)
class BlockStatement(Node):
  body: List[Node] = field(default_factory=list)

  child_fields = ("body",)


@dataclass(eq=False)
class ReturnStatement(Node):
  argument: Optional[Node] = None

  child_fields = ("argument",)


@dataclass(eq=False)
class ExpressionStatement(Node):
  expression: Optional[Node] = None

  child_fields = ("expression",)


@dataclass(eq=False)
class ImportDeclaration(Node):
  specifiers: List[Node] = field(default_factory=list)
  source: Optional[Literal] = None

  child_fields = ("specifiers", "source")


@dataclass(eq=False)
class ImportDefaultSpecifier(Node):
  local: Optional[Identifier] = None

  child_fields = ("local",)


@dataclass(eq=False)
class ImportNamespaceSpecifier(Node):
  local: Optional[Identifier] = None

  child_fields = ("local",)


@dataclass(eq=False)
class ImportSpecifier(Node):
  imported: Optional[Identifier] = None
  local: Optional[Identifier] = None

  child_fields = ("imported", "local")


@dataclass(eq=False)
class OtherNode(Node):
  """
  Any grammar construct the engine does not inspect (classes, loops, binary
  expressions, templates, ...). ``type`` holds the grammar's node type.
  """

  type: str = ""
  body: List[Node] = field(default_factory=list)

  child_fields = ("body",)


FUNCTION_KINDS = (ArrowFunctionExpression, FunctionExpression)


def walk(node: Node) -> Iterator[Node]:
  """
  Depth-first, pre-order iteration over a subtree (including ``node``).
  """
  stack = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(list(current.children())))


def link_parents(root: Node) -> None:
  """Sets the ``parent`` reference of every node below ``root``."""
  for node in walk(root):
    for child in node.children():
      child.parent = node


def is_identifier(node: Optional[Node], name: Optional[str] = None) -> bool:
  """True if ``node`` is an Identifier (optionally with the given name)."""
  if not isinstance(node, Identifier):
    return False
  return name is None or node.name == name


def is_string_literal(node: Optional[Node]) -> bool:
  """True if ``node`` is a string Literal."""
  return isinstance(node, Literal) and node.is_string


def static_property_name(member: MemberExpression) -> Optional[str]:
  """
  Returns the property name of ``a.b`` or ``a['b']``, or None for dynamic access.
  """
  prop = member.property
  if not member.computed and isinstance(prop, Identifier):
    return prop.name
  if member.computed and is_string_literal(prop):
    return prop.value
  return None


def property_key_name(prop: Property) -> Optional[str]:
  """
  Returns the static key of an object member (``a: 1``, ``'a': 1``), or None if the key
  is computed or not a name/string.
  """
  if prop.computed:
    return None
  if isinstance(prop.key, Identifier):
    return prop.key.name
  if is_string_literal(prop.key):
    return prop.key.value
  return None
