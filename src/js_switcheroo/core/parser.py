"""
Tree-sitter Parser Adapter.

Turns JavaScript / TypeScript source text into the ESTree-shaped node model of
`js_switcheroo.core.nodes`. Tree-sitter produces a concrete syntax tree with byte
offsets; this adapter:

1.  Picks the grammar (``javascript``, ``typescript``, ``tsx``).
2.  Rejects sources that only parse with error recovery (``SourceParseError``).
3.  Converts the CST bottom-up into ``Node`` dataclasses, folding grammar details
    (parenthesized expressions, shorthand patterns, method definitions) into their
    ESTree equivalents.
4.  Translates byte offsets to character offsets so spans slice the ``str`` source.

Requires: ``pip install tree-sitter tree-sitter-javascript tree-sitter-typescript``.
"""

import functools
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from js_switcheroo.core import nodes as n
from js_switcheroo.core.errors import SourceParseError

logger = logging.getLogger(__name__)

LANGUAGES = ("javascript", "typescript", "tsx")

_SUFFIX_LANGUAGES: Dict[str, str] = {
  ".js": "javascript",
  ".mjs": "javascript",
  ".cjs": "javascript",
  ".jsx": "javascript",
  ".ts": "typescript",
  ".mts": "typescript",
  ".cts": "typescript",
  ".tsx": "tsx",
}

_SIMPLE_ESCAPES = {
  "n": "\n",
  "t": "\t",
  "r": "\r",
  "b": "\b",
  "f": "\f",
  "v": "\v",
  "0": "\0",
}


def language_for_path(path: Path) -> Optional[str]:
  """
  Maps a file suffix to a grammar name.

  Args:
      path: Source file path.

  Returns:
      The grammar key, or None for unsupported files.
  """
  return _SUFFIX_LANGUAGES.get(path.suffix.lower())


@functools.lru_cache(maxsize=None)
def _get_language(language: str) -> Language:
  if language == "javascript":
    return Language(tree_sitter_javascript.language())
  if language == "typescript":
    return Language(tree_sitter_typescript.language_typescript())
  if language == "tsx":
    return Language(tree_sitter_typescript.language_tsx())
  raise ValueError(f"Unsupported language: '{language}'. Supported languages: {list(LANGUAGES)}")


def parse_source(text: str, language: str = "javascript") -> n.Program:
  """
  Parses a source unit into a ``Program`` node.

  Args:
      text: The source code.
      language: Grammar key (see ``LANGUAGES``).

  Returns:
      The root node, with parent references linked.

  Raises:
      SourceParseError: If the source contains syntax errors.
      ValueError: If the language is unknown.
  """
  parser = Parser(_get_language(language))
  source = text.encode("utf-8")
  tree = parser.parse(source)
  root = tree.root_node

  if root.has_error:
    bad = _first_error(root)
    row, column = bad.start_point if bad is not None else root.start_point
    raise SourceParseError(f"Syntax error at line {row + 1}, column {column + 1}", line=row + 1, column=column + 1)

  program = _Converter(source, text).convert(root)
  logger.debug("Parsed %d characters as %s", len(text), language)
  n.link_parents(program)
  return program


def _first_error(ts_node):
  """Locates the first ERROR or MISSING node below ``ts_node``."""
  if ts_node.type == "ERROR" or ts_node.is_missing:
    return ts_node
  for child in ts_node.children:
    if child.has_error or child.is_missing:
      found = _first_error(child)
      if found is not None:
        return found
  return None


def _decode_escape(seq: str) -> str:
  """
  Resolves one JavaScript escape sequence (including the leading backslash).
  """
  body = seq[1:]
  if not body:
    return seq
  head = body[0]
  if head in _SIMPLE_ESCAPES and len(body) == 1:
    return _SIMPLE_ESCAPES[head]
  if head == "x" and len(body) == 3:
    return chr(int(body[1:], 16))
  if head == "u":
    digits = body[1:].strip("{}")
    try:
      return chr(int(digits, 16))
    except ValueError:
      return seq
  if head in "\r\n\u2028\u2029":
    # Line continuation
    return ""
  return body


class _Converter:
  """
  Converts a tree-sitter CST into ``nodes`` dataclasses.
  """

  def __init__(self, source: bytes, text: str):
    self._source = source
    self._offsets: Optional[List[int]] = None
    if len(source) != len(text):
      # Multi-byte characters present: map every byte index to its char index.
      offsets: List[int] = []
      for index, char in enumerate(text):
        offsets.extend([index] * len(char.encode("utf-8")))
      offsets.append(len(text))
      self._offsets = offsets

    self._handlers: Dict[str, Callable] = {
      "program": self._program,
      "expression_statement": self._expression_statement,
      "lexical_declaration": self._variable_declaration,
      "variable_declaration": self._variable_declaration,
      "variable_declarator": self._variable_declarator,
      "identifier": self._identifier,
      "property_identifier": self._identifier,
      "private_property_identifier": self._identifier,
      "shorthand_property_identifier": self._identifier,
      "shorthand_property_identifier_pattern": self._identifier,
      "statement_identifier": self._identifier,
      "undefined": self._identifier,
      "this": self._this,
      "string": self._string,
      "number": self._number,
      "true": self._constant,
      "false": self._constant,
      "null": self._constant,
      "regex": self._regex,
      "member_expression": self._member_expression,
      "subscript_expression": self._subscript_expression,
      "call_expression": self._call_expression,
      "new_expression": self._new_expression,
      "assignment_expression": self._assignment_expression,
      "augmented_assignment_expression": self._assignment_expression,
      "object_pattern": self._object_pattern,
      "array_pattern": self._array_pattern,
      "assignment_pattern": self._assignment_pattern,
      "rest_pattern": self._rest,
      "object": self._object,
      "array": self._array,
      "spread_element": self._spread,
      "arrow_function": self._arrow_function,
      "function_expression": self._function_expression,
      "function": self._function_expression,
      "generator_function": self._function_expression,
      "function_declaration": self._function_declaration,
      "generator_function_declaration": self._function_declaration,
      "statement_block": self._block,
      "return_statement": self._return,
      "parenthesized_expression": self._parenthesized,
      "import_statement": self._import,
      "required_parameter": self._ts_parameter,
      "optional_parameter": self._ts_parameter,
    }

  # --- Helpers ---

  def _pos(self, byte_offset: int) -> int:
    if self._offsets is None:
      return byte_offset
    return self._offsets[byte_offset]

  def _span(self, ts_node) -> Dict[str, int]:
    return {"start": self._pos(ts_node.start_byte), "end": self._pos(ts_node.end_byte)}

  def _text(self, ts_node) -> str:
    return self._source[ts_node.start_byte : ts_node.end_byte].decode("utf-8")

  @staticmethod
  def _named(ts_node) -> list:
    return [c for c in ts_node.named_children if c.type != "comment"]

  def _convert_all(self, ts_nodes) -> List[n.Node]:
    return [self.convert(c) for c in ts_nodes]

  def _field(self, ts_node, name: str) -> Optional[n.Node]:
    child = ts_node.child_by_field_name(name)
    return self.convert(child) if child is not None else None

  def convert(self, ts_node) -> n.Node:
    handler = self._handlers.get(ts_node.type)
    if handler is None:
      return n.OtherNode(**self._span(ts_node), type=ts_node.type, body=self._convert_all(self._named(ts_node)))
    return handler(ts_node)

  # --- Statements ---

  def _program(self, ts_node) -> n.Node:
    body = [c for c in self._named(ts_node) if c.type != "hash_bang_line"]
    return n.Program(**self._span(ts_node), body=self._convert_all(body))

  def _expression_statement(self, ts_node) -> n.Node:
    named = self._named(ts_node)
    expression = self.convert(named[0]) if named else None
    return n.ExpressionStatement(**self._span(ts_node), expression=expression)

  def _variable_declaration(self, ts_node) -> n.Node:
    keyword = self._text(ts_node.children[0]) if ts_node.children else "var"
    declarators = [self.convert(c) for c in ts_node.named_children if c.type == "variable_declarator"]
    return n.VariableDeclaration(**self._span(ts_node), declaration_kind=keyword, declarations=declarators)

  def _variable_declarator(self, ts_node) -> n.Node:
    return n.VariableDeclarator(
      **self._span(ts_node),
      id=self._field(ts_node, "name"),
      init=self._field(ts_node, "value"),
    )

  def _block(self, ts_node) -> n.Node:
    return n.BlockStatement(**self._span(ts_node), body=self._convert_all(self._named(ts_node)))

  def _return(self, ts_node) -> n.Node:
    named = self._named(ts_node)
    argument = self.convert(named[0]) if named else None
    return n.ReturnStatement(**self._span(ts_node), argument=argument)

  def _import(self, ts_node) -> n.Node:
    specifiers: List[n.Node] = []
    for child in self._named(ts_node):
      if child.type != "import_clause":
        continue
      for part in self._named(child):
        if part.type == "identifier":
          specifiers.append(n.ImportDefaultSpecifier(**self._span(part), local=self._identifier(part)))
        elif part.type == "namespace_import":
          local = [c for c in self._named(part) if c.type == "identifier"]
          specifiers.append(
            n.ImportNamespaceSpecifier(**self._span(part), local=self._identifier(local[0]) if local else None)
          )
        elif part.type == "named_imports":
          for spec in self._named(part):
            if spec.type != "import_specifier":
              continue
            imported = spec.child_by_field_name("name")
            alias = spec.child_by_field_name("alias")
            specifiers.append(
              n.ImportSpecifier(
                **self._span(spec),
                imported=self.convert(imported),
                local=self.convert(alias if alias is not None else imported),
              )
            )
    source_node = ts_node.child_by_field_name("source")
    source = self.convert(source_node) if source_node is not None else None
    return n.ImportDeclaration(**self._span(ts_node), specifiers=specifiers, source=source)

  # --- Leaves ---

  def _identifier(self, ts_node) -> n.Node:
    return n.Identifier(**self._span(ts_node), name=self._text(ts_node))

  def _this(self, ts_node) -> n.Node:
    return n.ThisExpression(**self._span(ts_node))

  def _string(self, ts_node) -> n.Node:
    parts: List[str] = []
    for child in ts_node.named_children:
      if child.type == "escape_sequence":
        parts.append(_decode_escape(self._text(child)))
      else:
        parts.append(self._text(child))
    return n.Literal(**self._span(ts_node), value="".join(parts), raw=self._text(ts_node))

  def _number(self, ts_node) -> n.Node:
    raw = self._text(ts_node)
    cleaned = raw.replace("_", "").rstrip("n")
    value: object = raw
    try:
      value = int(cleaned, 0)
    except ValueError:
      try:
        value = float(cleaned)
      except ValueError:
        pass
    return n.Literal(**self._span(ts_node), value=value, raw=raw)

  def _constant(self, ts_node) -> n.Node:
    value = {"true": True, "false": False, "null": None}[ts_node.type]
    return n.Literal(**self._span(ts_node), value=value, raw=self._text(ts_node))

  def _regex(self, ts_node) -> n.Node:
    return n.Literal(**self._span(ts_node), value=None, raw=self._text(ts_node))

  # --- Expressions ---

  def _parenthesized(self, ts_node) -> n.Node:
    named = self._named(ts_node)
    if len(named) == 1:
      return self.convert(named[0])
    return n.OtherNode(**self._span(ts_node), type=ts_node.type, body=self._convert_all(named))

  def _member_expression(self, ts_node) -> n.Node:
    optional = any(c.type == "optional_chain" for c in ts_node.children)
    return n.MemberExpression(
      **self._span(ts_node),
      object=self._field(ts_node, "object"),
      property=self._field(ts_node, "property"),
      computed=False,
      optional=optional,
    )

  def _subscript_expression(self, ts_node) -> n.Node:
    optional = any(c.type == "optional_chain" for c in ts_node.children)
    return n.MemberExpression(
      **self._span(ts_node),
      object=self._field(ts_node, "object"),
      property=self._field(ts_node, "index"),
      computed=True,
      optional=optional,
    )

  def _arguments(self, ts_node) -> List[n.Node]:
    if ts_node is None:
      return []
    return self._convert_all(self._named(ts_node))

  def _call_expression(self, ts_node) -> n.Node:
    args_node = ts_node.child_by_field_name("arguments")
    if args_node is not None and args_node.type != "arguments":
      # Tagged template literal
      return n.OtherNode(**self._span(ts_node), type="tagged_template", body=self._convert_all(self._named(ts_node)))
    optional = any(c.type == "optional_chain" for c in ts_node.children)
    return n.CallExpression(
      **self._span(ts_node),
      callee=self._field(ts_node, "function"),
      arguments=self._arguments(args_node),
      optional=optional,
    )

  def _new_expression(self, ts_node) -> n.Node:
    return n.NewExpression(
      **self._span(ts_node),
      callee=self._field(ts_node, "constructor"),
      arguments=self._arguments(ts_node.child_by_field_name("arguments")),
    )

  def _assignment_expression(self, ts_node) -> n.Node:
    operator_node = ts_node.child_by_field_name("operator")
    operator = self._text(operator_node) if operator_node is not None else "="
    return n.AssignmentExpression(
      **self._span(ts_node),
      operator=operator,
      left=self._field(ts_node, "left"),
      right=self._field(ts_node, "right"),
    )

  def _spread(self, ts_node) -> n.Node:
    named = self._named(ts_node)
    return n.SpreadElement(**self._span(ts_node), argument=self.convert(named[0]) if named else None)

  def _rest(self, ts_node) -> n.Node:
    named = self._named(ts_node)
    return n.RestElement(**self._span(ts_node), argument=self.convert(named[0]) if named else None)

  def _array(self, ts_node) -> n.Node:
    return n.ArrayExpression(**self._span(ts_node), elements=self._convert_all(self._named(ts_node)))

  def _array_pattern(self, ts_node) -> n.Node:
    return n.ArrayPattern(**self._span(ts_node), elements=self._convert_all(self._named(ts_node)))

  def _assignment_pattern(self, ts_node) -> n.Node:
    return n.AssignmentPattern(
      **self._span(ts_node),
      left=self._field(ts_node, "left"),
      right=self._field(ts_node, "right"),
    )

  def _property_key(self, ts_node):
    """Returns (key node, computed flag) for a property name CST node."""
    if ts_node.type == "computed_property_name":
      named = self._named(ts_node)
      return (self.convert(named[0]) if named else None), True
    return self.convert(ts_node), False

  def _shorthand(self, ts_node) -> n.Property:
    key = self._identifier(ts_node)
    value = self._identifier(ts_node)
    return n.Property(**self._span(ts_node), key=key, value=value, shorthand=True)

  def _pair(self, ts_node) -> n.Property:
    key, computed = self._property_key(ts_node.child_by_field_name("key"))
    return n.Property(**self._span(ts_node), key=key, value=self._field(ts_node, "value"), computed=computed)

  def _object(self, ts_node) -> n.Node:
    properties: List[n.Node] = []
    for child in self._named(ts_node):
      if child.type == "pair":
        properties.append(self._pair(child))
      elif child.type == "shorthand_property_identifier":
        properties.append(self._shorthand(child))
      elif child.type == "method_definition":
        properties.append(self._method(child))
      else:
        properties.append(self.convert(child))
    return n.ObjectExpression(**self._span(ts_node), properties=properties)

  def _method(self, ts_node) -> n.Property:
    key, computed = self._property_key(ts_node.child_by_field_name("name"))
    function = n.FunctionExpression(
      **self._span(ts_node),
      params=self._params(ts_node.child_by_field_name("parameters")),
      body=self._field(ts_node, "body"),
    )
    return n.Property(**self._span(ts_node), key=key, value=function, computed=computed, method=True)

  def _object_pattern(self, ts_node) -> n.Node:
    properties: List[n.Node] = []
    for child in self._named(ts_node):
      if child.type == "pair_pattern":
        properties.append(self._pair(child))
      elif child.type == "shorthand_property_identifier_pattern":
        properties.append(self._shorthand(child))
      elif child.type == "object_assignment_pattern":
        left = child.child_by_field_name("left")
        if left is not None and left.type == "shorthand_property_identifier_pattern":
          default = n.AssignmentPattern(
            **self._span(child),
            left=self._identifier(left),
            right=self._field(child, "right"),
          )
          properties.append(
            n.Property(**self._span(child), key=self._identifier(left), value=default, shorthand=True)
          )
        else:
          properties.append(self.convert(child))
      else:
        properties.append(self.convert(child))
    return n.ObjectPattern(**self._span(ts_node), properties=properties)

  # --- Functions ---

  def _ts_parameter(self, ts_node) -> n.Node:
    pattern = ts_node.child_by_field_name("pattern")
    value = ts_node.child_by_field_name("value")
    if pattern is None:
      return n.OtherNode(**self._span(ts_node), type=ts_node.type, body=self._convert_all(self._named(ts_node)))
    if value is not None:
      return n.AssignmentPattern(**self._span(ts_node), left=self.convert(pattern), right=self.convert(value))
    return self.convert(pattern)

  def _params(self, ts_node) -> List[n.Node]:
    if ts_node is None:
      return []
    return self._convert_all(self._named(ts_node))

  @staticmethod
  def _is_async(ts_node) -> bool:
    return bool(ts_node.children) and ts_node.children[0].type == "async"

  def _arrow_function(self, ts_node) -> n.Node:
    single = ts_node.child_by_field_name("parameter")
    if single is not None:
      params = [self.convert(single)]
    else:
      params = self._params(ts_node.child_by_field_name("parameters"))
    body_node = ts_node.child_by_field_name("body")
    body = self.convert(body_node) if body_node is not None else None
    return n.ArrowFunctionExpression(
      **self._span(ts_node),
      params=params,
      body=body,
      expression=not isinstance(body, n.BlockStatement),
      is_async=self._is_async(ts_node),
    )

  def _function_expression(self, ts_node) -> n.Node:
    return n.FunctionExpression(
      **self._span(ts_node),
      id=self._field(ts_node, "name"),
      params=self._params(ts_node.child_by_field_name("parameters")),
      body=self._field(ts_node, "body"),
      is_async=self._is_async(ts_node),
    )

  def _function_declaration(self, ts_node) -> n.Node:
    return n.FunctionDeclaration(
      **self._span(ts_node),
      id=self._field(ts_node, "name"),
      params=self._params(ts_node.child_by_field_name("parameters")),
      body=self._field(ts_node, "body"),
      is_async=self._is_async(ts_node),
    )
