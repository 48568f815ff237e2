"""
Rule: shopware-admin/no-sw-extension-override

Extensions must not override the components of the extension manager
(``sw-extension-*``), neither through ``Shopware.Component.override`` nor through a
local alias of ``Shopware.Component``.
"""

from typing import List

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import MemberPath, TrackedSymbol
from js_switcheroo.core.hooks import MigrationRule, register_rule
from js_switcheroo.core.nodes import CallExpression, MemberExpression, is_identifier, is_string_literal
from js_switcheroo.core.shapes import is_member_path
from js_switcheroo.enums import Ruleset


class ExtensionOverrideSettings(BaseModel):
  component_root: str = Field("Shopware")
  component_member: str = Field("Component")
  protected_prefix: str = Field("sw-extension-", description="Component names that may not be overridden.")


@register_rule(
  "no-sw-extension-override",
  Ruleset.ADMIN,
  description="Disallow overriding sw-extension-* components.",
)
class NoSwExtensionOverride(MigrationRule):
  settings_model = ExtensionOverrideSettings
  settings: ExtensionOverrideSettings

  @property
  def target(self) -> MemberPath:
    return MemberPath(self.settings.component_root, self.settings.component_member)

  def tracked_symbols(self) -> List[TrackedSymbol]:
    return [self.target]

  def visit_CallExpression(self, node: CallExpression) -> None:
    callee = node.callee
    if not isinstance(callee, MemberExpression) or callee.computed or not is_identifier(callee.property, "override"):
      return
    receiver = callee.object
    if not is_member_path(receiver, self.target) and self.context.bindings.resolve(receiver, self.target.path) is None:
      return
    if not node.arguments or not is_string_literal(node.arguments[0]):
      return
    if node.arguments[0].value.startswith(self.settings.protected_prefix):
      self.report(node, "Changing the Shopware Extension Manager is not allowed")
