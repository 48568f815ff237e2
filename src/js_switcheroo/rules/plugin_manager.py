"""
Rule: shopware-storefront/migrate-plugin-manager

Plugin system modules are no longer importable from extensions; their globals
are used instead::

    import PluginManager from 'src/plugin-system/plugin.manager';

becomes::

    const PluginManager = window.PluginManager;
"""

from typing import Dict

from pydantic import BaseModel, Field

from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.hooks import MigrationRule, register_rule
from js_switcheroo.core.nodes import ImportDeclaration
from js_switcheroo.enums import Ruleset
from js_switcheroo.rules._common import import_source


class PluginManagerSettings(BaseModel):
  plugin_globals: Dict[str, str] = Field(
    default_factory=lambda: {
      "src/plugin-system/plugin.manager": "window.PluginManager",
      "src/plugin-system/plugin.class": "window.PluginBaseClass",
    },
    description="Module path -> global expression replacing its default export.",
  )


@register_rule(
  "migrate-plugin-manager",
  Ruleset.STOREFRONT,
  fixable=True,
  description="Migrate plugin system imports to their window globals.",
)
class MigratePluginManager(MigrationRule):
  settings_model = PluginManagerSettings
  settings: PluginManagerSettings

  def visit_ImportDeclaration(self, node: ImportDeclaration) -> None:
    module = import_source(node)
    replacement = self.settings.plugin_globals.get(module or "")
    if replacement is None or not node.specifiers:
      return
    local = getattr(node.specifiers[0], "local", None)
    if local is None:
      return

    message = f"Import from {module} should use {replacement}"
    if len(node.specifiers) == 1:
      self.report(node, message, fix=Fix.replace(node, f"const {local.name} = {replacement};"))
    else:
      # Named imports next to the default have no global counterpart.
      self.report(node, message)
