"""
Shape Matchers.

A family of independent detectors, each recognising one deprecated usage shape
against a syntax node (and, where aliases matter, the current binding table). Every
matcher is a pure predicate-plus-capture function: it returns a `Match` holding the
captured sub-nodes by role name, or ``None`` when the node does not have the shape.
Malformed input that only superficially resembles a shape is a non-match, never an
exception.

Shapes:

A.  Direct global access        ``Shopware.State``
B.  Destructured alias          ``const { State } = Shopware``
C.  Unused helper import        ``const { mapState } = Component.getComponentHelper()``
D.  Spread-call mapping         ``...mapState('cart', ['items'])``
E.  Path call                   ``State.commit('cart/addItem', payload)``
F.  Callback call               ``this.client.get(url, res => ...)``
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from js_switcheroo.analysis.bindings import BindingTracker, MemberPath
from js_switcheroo.core.nodes import (
  ArrayExpression,
  ArrowFunctionExpression,
  AssignmentPattern,
  BlockStatement,
  CallExpression,
  FunctionExpression,
  Identifier,
  MemberExpression,
  Node,
  ObjectExpression,
  ObjectPattern,
  Property,
  ReturnStatement,
  SpreadElement,
  VariableDeclaration,
  VariableDeclarator,
  is_identifier,
  is_string_literal,
  property_key_name,
  static_property_name,
)
from js_switcheroo.enums import Shape

PATH_SEPARATOR = "/"


@dataclass
class Match:
  """
  A node that satisfied a shape predicate, with its captured sub-nodes.
  """

  shape: Shape
  anchor: Node
  captures: Dict[str, Any] = field(default_factory=dict)

  def __getitem__(self, role: str) -> Any:
    return self.captures[role]

  def get(self, role: str, default: Any = None) -> Any:
    return self.captures.get(role, default)


@dataclass
class MappedAccessor:
  """
  One entry of a spread mapping, to become one generated accessor.

  Either ``member`` is set (``'items'`` or ``total: 'sum'``) or ``param`` and
  ``expression`` are (``total: state => state.sum``).
  """

  name: str
  member: Optional[str] = None
  param: Optional[str] = None
  expression: Optional[Node] = None


def _call_method_name(call: Node) -> Optional[str]:
  """Returns ``m`` for ``receiver.m(...)`` calls, else None."""
  if not isinstance(call, CallExpression) or not isinstance(call.callee, MemberExpression):
    return None
  if call.callee.computed:
    return None
  return static_property_name(call.callee)


def is_member_path(node: Optional[Node], target: MemberPath) -> bool:
  """True for ``Root.Sub`` (non-computed) with the configured names."""
  return (
    isinstance(node, MemberExpression)
    and not node.computed
    and is_identifier(node.object, target.root)
    and is_identifier(node.property, target.member)
  )


# --- A. Direct global access ---


def match_direct_access(node: Node, target: MemberPath) -> Optional[Match]:
  """
  Matches any ``Root.Sub`` member access.
  """
  if not is_member_path(node, target):
    return None
  return Match(Shape.DIRECT_ACCESS, node, {"root": target.root, "member": target.member})


# --- B. Destructured alias declaration ---


def match_destructured_alias(node: Node, target: MemberPath) -> List[Match]:
  """
  Matches ``const { Sub } = Root`` (also ``{ Sub: Alias }`` and ``{ Sub = d }``).

  Returns one match per destructured property whose key is the tracked member.
  Captures ``property``, ``key`` (the node whose text is rewritten) and
  ``local_name``.
  """
  if not isinstance(node, VariableDeclarator):
    return []
  if not isinstance(node.id, ObjectPattern) or not is_identifier(node.init, target.root):
    return []

  matches = []
  for prop in node.id.properties:
    if not isinstance(prop, Property) or property_key_name(prop) != target.member or prop.key is None:
      continue
    local = prop.value.left if isinstance(prop.value, AssignmentPattern) else prop.value
    if not isinstance(local, Identifier):
      continue
    matches.append(
      Match(
        Shape.DESTRUCTURED_ALIAS,
        prop,
        {"property": prop, "key": prop.key, "local_name": local.name, "shorthand": prop.shorthand},
      )
    )
  return matches


# --- C. Unused helper import ---


def match_helper_import(node: Node, namespace: str, factory: str) -> Optional[Match]:
  """
  Matches ``const { ... } = Namespace.factory(...)`` with a single declarator.

  The namespace is matched by name only, however it was bound.
  """
  if not isinstance(node, VariableDeclaration) or node.declaration_kind != "const":
    return None
  if len(node.declarations) != 1:
    return None
  declarator = node.declarations[0]
  if not isinstance(declarator.id, ObjectPattern) or not isinstance(declarator.init, CallExpression):
    return None
  callee = declarator.init.callee
  if not isinstance(callee, MemberExpression) or not is_identifier(callee.object, namespace):
    return None
  if callee.computed or not is_identifier(callee.property, factory):
    return None
  return Match(Shape.HELPER_IMPORT, node, {"declarator": declarator, "call": declarator.init})


# --- D. Spread-call mapping ---


def _returned_expression(function: Node) -> Optional[Node]:
  """
  The expression a function returns: the whole body of an expression-bodied arrow,
  or the argument of the first top-level ``return`` of a block body.
  """
  body = getattr(function, "body", None)
  if isinstance(function, ArrowFunctionExpression) and function.expression:
    return body
  if isinstance(body, BlockStatement):
    for statement in body.body:
      if isinstance(statement, ReturnStatement) and statement.argument is not None:
        return statement.argument
  return None


def _object_accessor(prop: Node) -> Optional[MappedAccessor]:
  if not isinstance(prop, Property):
    return None
  name = property_key_name(prop)
  if name is None:
    return None
  value = prop.value
  if is_string_literal(value):
    return MappedAccessor(name=name, member=value.value)
  if isinstance(value, (ArrowFunctionExpression, FunctionExpression)):
    if len(value.params) != 1 or not isinstance(value.params[0], Identifier):
      return None
    expression = _returned_expression(value)
    if expression is None:
      return None
    return MappedAccessor(name=name, param=value.params[0].name, expression=expression)
  return None


def match_spread_mapping(node: Node, helpers: Sequence[str]) -> Optional[Match]:
  """
  Matches ``...helper('storeKey', ['a', 'b'])`` and ``...helper('storeKey', { .. })``.

  Captures ``helper``, ``store_key``, ``form`` ('array' | 'object'), ``mapping``
  and ``accessors`` (the structurally valid entries, in source order). Array
  elements that are not string literals and object members of an unsupported shape
  are left out of ``accessors``. Only spreads that are members of an object
  literal match; accessors are not valid in argument or array position.
  """
  if not isinstance(node, SpreadElement) or not isinstance(node.argument, CallExpression):
    return None
  if not isinstance(node.parent, ObjectExpression):
    return None
  call = node.argument
  if not isinstance(call.callee, Identifier) or call.callee.name not in helpers:
    return None
  if len(call.arguments) != 2 or not is_string_literal(call.arguments[0]):
    return None

  mapping = call.arguments[1]
  accessors: List[MappedAccessor] = []
  if isinstance(mapping, ArrayExpression):
    form = "array"
    for element in mapping.elements:
      if is_string_literal(element):
        accessors.append(MappedAccessor(name=element.value, member=element.value))
  elif isinstance(mapping, ObjectExpression):
    form = "object"
    for prop in mapping.properties:
      accessor = _object_accessor(prop)
      if accessor is not None:
        accessors.append(accessor)
  else:
    return None

  return Match(
    Shape.SPREAD_MAPPING,
    node,
    {
      "helper": call.callee.name,
      "store_key": call.arguments[0].value,
      "form": form,
      "mapping": mapping,
      "accessors": accessors,
    },
  )


# --- E. Path call ---


def split_path(value: str) -> Optional[List[str]]:
  """
  Splits ``'target/action'``; returns None unless there are exactly two non-empty
  segments.
  """
  parts = value.split(PATH_SEPARATOR)
  if len(parts) != 2 or not all(parts):
    return None
  return parts


def match_path_call(
  node: Node,
  target: MemberPath,
  verbs: Sequence[str],
  bindings: Optional[BindingTracker] = None,
) -> Optional[Match]:
  """
  Matches ``Root.Sub.verb('target/action', ...args)`` and the same call through a
  local alias of ``Root.Sub`` (a tracked binding, or the bare member name).

  Captures ``verb``, ``receiver``, ``qualified`` (True for the ``Root.Sub`` form),
  ``alias`` (the BindingEntry, if the receiver is a tracked alias), ``target``,
  ``action`` and ``arguments`` (the remaining call arguments).
  """
  verb = _call_method_name(node)
  if verb is None or verb not in verbs:
    return None
  receiver = node.callee.object

  alias = None
  if is_member_path(receiver, target):
    qualified = True
  else:
    qualified = False
    alias = bindings.resolve(receiver, target.path) if bindings is not None else None
    if alias is None and not is_identifier(receiver, target.member):
      return None

  if not node.arguments or not is_string_literal(node.arguments[0]):
    return None
  parts = split_path(node.arguments[0].value)
  if parts is None:
    return None

  return Match(
    Shape.PATH_CALL,
    node,
    {
      "verb": verb,
      "receiver": receiver,
      "qualified": qualified,
      "alias": alias,
      "target": parts[0],
      "action": parts[1],
      "arguments": list(node.arguments[1:]),
    },
  )


# --- F. Callback call ---


def is_function_shaped(node: Node) -> bool:
  """Arrow functions, function expressions and ``fn.bind(...)`` references."""
  if isinstance(node, (ArrowFunctionExpression, FunctionExpression)):
    return True
  return _call_method_name(node) == "bind"


def match_callback_call(
  node: Node,
  bindings: BindingTracker,
  path: str,
  methods: Mapping[str, int],
) -> Optional[Match]:
  """
  Matches ``alias.method(<leading args>, ..., callback, ...)`` where ``alias`` is
  tracked for ``path`` and ``methods`` maps each method name to its number of
  required leading arguments (the first is the URL, the second the request body).

  Exactly one function-shaped argument must follow the leading ones; call sites
  with more than one are ambiguous and do not match.

  Captures ``method``, ``alias``, ``url``, ``data`` (or None), ``callback``,
  ``callback_index`` and ``content_type`` (a string literal directly after the
  callback, or None).
  """
  method = _call_method_name(node)
  if method is None or method not in methods:
    return None
  alias = bindings.resolve(node.callee.object, path)
  if alias is None:
    return None

  required = methods[method]
  args = node.arguments
  if len(args) < required or required < 1:
    return None

  candidates = [index for index in range(required, len(args)) if is_function_shaped(args[index])]
  if len(candidates) != 1:
    return None
  index = candidates[0]

  content_type = None
  if index + 1 < len(args) and is_string_literal(args[index + 1]):
    content_type = args[index + 1]

  return Match(
    Shape.CALLBACK_CALL,
    node,
    {
      "method": method,
      "alias": alias,
      "url": args[0],
      "data": args[1] if required >= 2 else None,
      "callback": args[index],
      "callback_index": index,
      "content_type": content_type,
    },
  )
