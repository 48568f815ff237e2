"""
Rule: shopware-admin/no-snippet-import

Snippets are loaded from the ``snippet`` folder automatically; passing them to
``Shopware.Module.register`` puts them into the bundle.
"""

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import MemberPath
from js_switcheroo.core.hooks import MigrationRule, register_rule
from js_switcheroo.core.nodes import (
  CallExpression,
  MemberExpression,
  ObjectExpression,
  Property,
  is_identifier,
  property_key_name,
  static_property_name,
)
from js_switcheroo.core.shapes import is_member_path
from js_switcheroo.enums import Ruleset

MESSAGE = (
  "Passing 'snippets' to Shopware.Module.register is forbidden as it increases the bundle size. "
  "Snippets are automatically loaded when they are placed in a folder named snippet."
)


class SnippetImportSettings(BaseModel):
  module_root: str = Field("Shopware")
  module_member: str = Field("Module")


@register_rule(
  "no-snippet-import",
  Ruleset.ADMIN,
  description="Forbid passing `snippets` to Shopware.Module.register.",
)
class NoSnippetImport(MigrationRule):
  settings_model = SnippetImportSettings
  settings: SnippetImportSettings

  def _is_module(self, receiver) -> bool:
    target = MemberPath(self.settings.module_root, self.settings.module_member)
    return is_member_path(receiver, target) or is_identifier(receiver, self.settings.module_member)

  def visit_CallExpression(self, node: CallExpression) -> None:
    callee = node.callee
    if not isinstance(callee, MemberExpression) or static_property_name(callee) != "register":
      return
    if not self._is_module(callee.object) or len(node.arguments) < 2:
      return
    options = node.arguments[1]
    if not isinstance(options, ObjectExpression):
      return
    for prop in options.properties:
      if isinstance(prop, Property) and property_key_name(prop) == "snippets":
        self.report(prop, MESSAGE)
