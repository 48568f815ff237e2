"""
Rule: shopware-storefront/no-http-client

Replaces the callback based storefront ``HttpClient`` with the Fetch API::

    this.client.get(url, res => { this.render(res); });

becomes::

    fetch(url)
        .then(response => response.text())
        .then((res) => {
            this.render(res);
        })

``post`` calls get an options object (method, ``Content-Type`` header and body).
Once every call is rewritten the import and the ``new HttpClient()`` statements
are removed.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import ConstructedInstance, TrackedSymbol, binding_key
from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.hooks import register_rule
from js_switcheroo.core.nodes import (
  AssignmentExpression,
  CallExpression,
  ExpressionStatement,
  Identifier,
  ImportDeclaration,
  NewExpression,
  VariableDeclaration,
  VariableDeclarator,
  is_identifier,
)
from js_switcheroo.core.shapes import match_callback_call
from js_switcheroo.enums import Ruleset
from js_switcheroo.rules._common import RetiringRule, import_source


class HttpClientSettings(BaseModel):
  client_class: str = Field("HttpClient", description="Class of the deprecated client.")
  client_module: str = Field("src/service/http-client.service", description="Module exporting the client.")
  fetch_function: str = Field("fetch", description="Replacement transport call.")
  client_methods: Dict[str, int] = Field(
    default_factory=lambda: {"get": 1, "post": 2},
    description="Rewritten methods and their number of leading arguments.",
  )


@register_rule(
  "no-http-client",
  Ruleset.STOREFRONT,
  fixable=True,
  description="Replace the storefront HttpClient with the Fetch API.",
)
class NoHttpClient(RetiringRule):
  settings_model = HttpClientSettings
  settings: HttpClientSettings

  @property
  def instance(self) -> ConstructedInstance:
    return ConstructedInstance(self.settings.client_class)

  def tracked_symbols(self) -> List[TrackedSymbol]:
    return [self.instance]

  def _is_construction(self, node) -> bool:
    return isinstance(node, NewExpression) and is_identifier(node.callee, self.settings.client_class)

  def visit_ImportDeclaration(self, node: ImportDeclaration) -> None:
    if import_source(node) != self.settings.client_module:
      return
    names = [spec.local.name for spec in node.specifiers if getattr(spec, "local", None) is not None]
    self.retire(
      node,
      f"Remove {self.settings.client_class} import as {self.settings.fetch_function} will be used instead",
      *names,
    )

  def visit_VariableDeclarator(self, node: VariableDeclarator) -> None:
    if not isinstance(node.id, Identifier) or not self._is_construction(node.init):
      return
    message = (
      f"Remove {self.settings.client_class} assignment for '{node.id.name}' "
      f"as {self.settings.fetch_function} will be used instead."
    )
    declaration = node.parent
    if isinstance(declaration, VariableDeclaration) and len(declaration.declarations) == 1:
      self.retire(declaration, message, node.id.name, self.settings.client_class)
    else:
      self.report(node, message)

  def visit_AssignmentExpression(self, node: AssignmentExpression) -> None:
    if node.operator != "=" or not self._is_construction(node.right):
      return
    key = binding_key(node.left)
    if key is None:
      return
    message = f"Remove {self.settings.client_class} assignment for '{key}' as {self.settings.fetch_function} will be used instead."
    if isinstance(node.parent, ExpressionStatement):
      self.retire(node.parent, message, key, self.settings.client_class)
    else:
      self.report(node, message)

  def visit_CallExpression(self, node: CallExpression) -> None:
    s = self.settings
    match = match_callback_call(node, self.context.bindings, self.instance.path, s.client_methods)
    if match is None:
      return
    synthesizer = self.context.synthesizer
    diagnostic = self.report(
      node,
      f"Use fetch API instead of {match['alias'].local_name}.{match['method']}",
      fix=lambda: Fix.replace(node, synthesizer.fetch_chain(match, s.fetch_function)),
    )
    if diagnostic.fixable:
      self.consume(node, node.callee.object)
