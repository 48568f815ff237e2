"""
Rule: shopware-admin/no-src-import

Administration core modules are not importable from extensions; the global
``Shopware`` object exposes what they provide.
"""

from pydantic import BaseModel, Field

from js_switcheroo.core.hooks import MigrationRule, register_rule
from js_switcheroo.core.nodes import ImportDeclaration
from js_switcheroo.enums import Ruleset
from js_switcheroo.rules._common import import_source

DOCS_URL = "https://developer.shopware.com/docs/guides/plugins/plugins/administration/the-shopware-object"


class SrcImportSettings(BaseModel):
  core_prefix: str = Field("@administration/", description="Module prefix of the administration core.")


@register_rule(
  "no-src-import",
  Ruleset.ADMIN,
  description="Forbid imports from the administration core.",
)
class NoSrcImport(MigrationRule):
  settings_model = SrcImportSettings
  settings: SrcImportSettings

  def visit_ImportDeclaration(self, node: ImportDeclaration) -> None:
    module = import_source(node)
    if module is None or not module.startswith(self.settings.core_prefix):
      return
    self.report(
      node,
      f'You can\'t use imports directly from the Shopware Core via "{module}". '
      f"Use the global Shopware object directly instead ({DOCS_URL})",
    )
