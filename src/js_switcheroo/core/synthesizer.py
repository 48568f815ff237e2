"""
Rewrite Synthesizer.

Builds replacement text for a `Match`. Everything here is purely textual: the
original source is sliced verbatim, combined with fixed templates and indented to
match the line the anchor sits on, one step being the file's own indentation unit.
The output is never re-parsed.

Every builder raises `SynthesisError` when a required capture is missing or the
input cannot be rewritten faithfully; callers turn that into an advisory diagnostic.
"""

import re
import textwrap
from typing import List, Optional

from js_switcheroo.analysis.bindings import BindingEntry
from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.errors import SynthesisError
from js_switcheroo.core.nodes import ArrowFunctionExpression, BlockStatement, Node
from js_switcheroo.core.shapes import MappedAccessor, Match
from js_switcheroo.core.source import SourceUnit
from js_switcheroo.enums import BindingForm, Shape

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")

DEFAULT_CONTENT_TYPE = "'application/json'"

DEFAULT_INDENT_UNIT = "    "


def is_identifier_name(value: str) -> bool:
  return bool(IDENTIFIER_RE.match(value))


def quote(value: str) -> str:
  """Renders ``value`` as a single-quoted JavaScript string literal."""
  escaped = (
    value.replace("\\", "\\\\")
    .replace("'", "\\'")
    .replace("\n", "\\n")
    .replace("\r", "\\r")
    .replace("\u2028", "\\u2028")
    .replace("\u2029", "\\u2029")
  )
  return f"'{escaped}'"


def member_access(name: str) -> str:
  """``.name`` when ``name`` is a valid identifier, ``['name']`` otherwise."""
  return f".{name}" if is_identifier_name(name) else f"[{quote(name)}]"


def property_name(name: str) -> str:
  """An object/method key for ``name``, quoted when needed."""
  return name if is_identifier_name(name) else quote(name)


def indent_unit(indent: str, style: Optional[str] = None) -> str:
  """
  One further level of indentation below ``indent``.

  Tab-indented lines step by a tab. Otherwise the file's own ``style`` is used when
  known, falling back to four spaces.
  """
  if indent.startswith("\t"):
    return "\t"
  if style is not None and not (indent and style == "\t"):
    return style
  return DEFAULT_INDENT_UNIT


class RewriteSynthesizer:
  """
  Produces replacement text for matches found in one source unit.
  """

  def __init__(self, source: SourceUnit):
    self.source = source

  # --- Primitives ---

  def source_text(self, node: Optional[Node]) -> str:
    """
    Returns the verbatim original text of ``node``.

    Raises:
        SynthesisError: If the node is absent.
    """
    if node is None:
      raise SynthesisError("Required sub-node is missing")
    return self.source.node_text(node)

  def line_indent(self, node: Node) -> str:
    return self.source.line_indent(node.start)

  def indent_unit(self, indent: str) -> str:
    return indent_unit(indent, self.source.indent_style)

  def statement_deletion(self, node: Node) -> Fix:
    """
    A deletion of ``node``. When the node is the only thing on its line(s) the whole
    line, including its newline, is removed so no blank line is left behind.
    """
    line_start = self.source.line_start(node.start)
    line_end = self.source.line_end(node.end)
    before = self.source.slice(line_start, node.start)
    after = self.source.slice(node.end, line_end)
    if before.strip() or after.strip():
      return Fix.remove(node)
    if line_end < len(self.source.text):
      line_end += 1
    return Fix(start=line_start, end=line_end, text="")

  # --- Shape D: spread mapping -> explicit accessors ---

  def store_expression(self, store_key: str, root: str = "Shopware", member: str = "Store", getter: str = "get") -> str:
    return f"{root}.{member}.{getter}({quote(store_key)})"

  def _accessor_body(self, accessor: MappedAccessor, store: str) -> Optional[str]:
    if accessor.member is not None:
      return store + member_access(accessor.member)
    if accessor.param is None or accessor.expression is None:
      return None
    text = self.source_text(accessor.expression)
    pattern = re.compile(r"^" + re.escape(accessor.param) + r"(?![\w$])")
    if not pattern.match(text):
      return None
    return store + text[len(accessor.param) :]

  def store_accessors(self, match: Match, root: str = "Shopware", member: str = "Store", getter: str = "get") -> str:
    """
    Expands a spread mapping into explicit accessor definitions.

    ``...mapState('cart', ['items'])`` becomes::

        items() {
            return Shopware.Store.get('cart').items;
        }

    Accessors are separated by a comma and a newline at the anchor's indentation,
    with no trailing separator. Function-valued entries whose returned expression
    does not start with the function's parameter are skipped.

    Raises:
        SynthesisError: If not a single accessor could be produced.
    """
    if match.shape is not Shape.SPREAD_MAPPING:
      raise SynthesisError(f"Cannot build accessors for {match.shape.value}")

    indent = self.line_indent(match.anchor)
    unit = self.indent_unit(indent)
    store = self.store_expression(match["store_key"], root, member, getter)

    accessors: List[str] = []
    for accessor in match.get("accessors", []):
      body = self._accessor_body(accessor, store)
      if body is None:
        continue
      accessors.append(f"{property_name(accessor.name)}() {{\n{indent}{unit}return {body};\n{indent}}}")

    if not accessors:
      raise SynthesisError("Mapping yields no rewritable entries")
    return (",\n" + indent).join(accessors)

  # --- Shape E: path call -> store call ---

  def store_prefix(self, match: Match, root: str = "Shopware", member: str = "Store") -> str:
    """
    Chooses the receiver of the rewritten store call.

    Fully qualified calls keep the root; destructured aliases keep their local name
    (the shorthand form is renamed together with its declaration); assigned aliases
    still hold the old value, so they are replaced by the qualified store.
    """
    if match["qualified"]:
      return f"{root}.{member}"
    alias: Optional[BindingEntry] = match.get("alias")
    if alias is None:
      return member
    if alias.form is BindingForm.DESTRUCTURED:
      return member if alias.shorthand else alias.local_name
    return f"{root}.{member}"

  def store_call(self, match: Match, root: str = "Shopware", member: str = "Store", getter: str = "get") -> str:
    """
    ``State.commit('cart/addItem', item)`` -> ``Store.get('cart').addItem(item)``.
    """
    if match.shape is not Shape.PATH_CALL:
      raise SynthesisError(f"Cannot build a store call for {match.shape.value}")
    prefix = self.store_prefix(match, root, member)
    args = ", ".join(self.source_text(arg) for arg in match["arguments"])
    return f"{prefix}.{getter}({quote(match['target'])}){member_access(match['action'])}({args})"

  # --- Shape F: callback call -> promise chain ---

  def _inline_block(self, block: BlockStatement, indent: str) -> Optional[str]:
    inner = self.source.slice(block.start + 1, block.end - 1)
    if "`" in inner:
      # Re-indenting could alter template literal contents.
      return None

    lines = inner.split("\n")
    first = None
    if lines and lines[0].strip():
      first = lines.pop(0).strip()
    while lines and not lines[-1].strip():
      lines.pop()
    while lines and not lines[0].strip():
      lines.pop(0)

    body = [first] if first is not None else []
    body.extend(textwrap.dedent("\n".join(lines)).split("\n") if lines else [])
    return "\n".join(f"{indent}{line.rstrip()}" if line.strip() else "" for line in body)

  def promise_continuation(self, callback: Node, indent: str) -> str:
    """
    Builds the ``.then(...)`` step for a callback.

    A non-async arrow function with exactly one parameter is inlined with its body
    re-indented. Any other callback is passed to ``.then`` verbatim, which keeps its
    own ``this`` binding and arity intact.
    """
    unit = self.indent_unit(indent)
    if isinstance(callback, ArrowFunctionExpression) and len(callback.params) == 1 and not callback.is_async:
      param = self.source_text(callback.params[0])
      if callback.expression:
        body = f"{indent}{unit}return {self.source_text(callback.body)};"
      elif isinstance(callback.body, BlockStatement):
        body = self._inline_block(callback.body, indent + unit)
      else:
        body = None
      if body is not None:
        opening = f".then(({param}) => {{"
        return f"{opening}\n{body}\n{indent}}})" if body else f"{opening}\n{indent}}})"
    return f".then({self.source_text(callback)})"

  def fetch_chain(self, match: Match, fetch: str = "fetch") -> str:
    """
    ``client.get(url, cb)`` -> ``fetch(url).then(response => response.text()).then(cb)``.

    ``post`` calls additionally carry the method, a ``Content-Type`` header (the
    string literal after the callback, or JSON) and the request body.
    """
    if match.shape is not Shape.CALLBACK_CALL:
      raise SynthesisError(f"Cannot build a fetch chain for {match.shape.value}")

    indent = self.line_indent(match.anchor)
    unit = self.indent_unit(indent)
    url = self.source_text(match["url"])

    method = match["method"]
    if method == "get":
      head = f"{fetch}({url})"
    elif method == "post":
      data = self.source_text(match["data"])
      content_type = match.get("content_type")
      header = self.source_text(content_type) if content_type is not None else DEFAULT_CONTENT_TYPE
      head = (
        f"{fetch}({url}, {{\n"
        f"{indent}{unit}method: 'POST',\n"
        f"{indent}{unit}headers: {{\n"
        f"{indent}{unit}{unit}'Content-Type': {header}\n"
        f"{indent}{unit}}},\n"
        f"{indent}{unit}body: {data}\n"
        f"{indent}}})"
      )
    else:
      raise SynthesisError(f"Unsupported request method '{method}'")

    step = indent + unit
    then = self.promise_continuation(match["callback"], step)
    return f"{head}\n{step}.then(response => response.text())\n{step}{then}"
