"""
Rule: shopware-storefront/no-query-string

Replaces the ``query-string`` package with ``URLSearchParams``:

* ``querystring.parse(x)``     -> ``Object.fromEntries(new URLSearchParams(x).entries())``
* ``querystring.stringify(x)`` -> ``new URLSearchParams(x).toString()``
"""

from typing import List

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import ModuleImport, TrackedSymbol
from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.hooks import register_rule
from js_switcheroo.core.nodes import (
  CallExpression,
  ImportDeclaration,
  MemberExpression,
  is_identifier,
  static_property_name,
)
from js_switcheroo.enums import Ruleset
from js_switcheroo.rules._common import RetiringRule, import_source

TEMPLATES = {
  "parse": "Object.fromEntries(new URLSearchParams({arg}).entries())",
  "stringify": "new URLSearchParams({arg}).toString()",
}


class QueryStringSettings(BaseModel):
  query_string_module: str = Field("query-string")
  query_string_name: str = Field("querystring", description="Name used when the import is not in the unit.")


@register_rule(
  "no-query-string",
  Ruleset.STOREFRONT,
  fixable=True,
  description="Transform querystring.parse/stringify to URLSearchParams.",
)
class NoQueryString(RetiringRule):
  settings_model = QueryStringSettings
  settings: QueryStringSettings

  @property
  def module(self) -> ModuleImport:
    return ModuleImport(self.settings.query_string_module)

  def tracked_symbols(self) -> List[TrackedSymbol]:
    return [self.module]

  def visit_ImportDeclaration(self, node: ImportDeclaration) -> None:
    if import_source(node) != self.settings.query_string_module:
      return
    names = [spec.local.name for spec in node.specifiers if getattr(spec, "local", None) is not None]
    self.retire(node, "Remove querystring import as URLSearchParams is used instead", *names)

  def _is_query_string(self, receiver) -> bool:
    if self.context.bindings.resolve(receiver, self.module.path) is not None:
      return True
    return is_identifier(receiver, self.settings.query_string_name)

  def visit_CallExpression(self, node: CallExpression) -> None:
    callee = node.callee
    if not isinstance(callee, MemberExpression) or callee.computed or not node.arguments:
      return
    method = static_property_name(callee)
    if method not in TEMPLATES or not self._is_query_string(callee.object):
      return

    argument = self.context.synthesizer.source_text(node.arguments[0])
    diagnostic = self.report(
      node,
      f"Use URLSearchParams instead of querystring.{method}",
      fix=Fix.replace(node, TEMPLATES[method].format(arg=argument)),
    )
    if diagnostic.fixable:
      self.consume(node, callee.object)
