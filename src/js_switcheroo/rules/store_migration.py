"""
Rule: shopware-admin/no-shopware-store

Migrates administration code from the Vuex based ``Shopware.State`` to the Pinia
based ``Shopware.Store`` (platform 6.7):

* ``const { State } = Shopware``                -> ``const { Store } = Shopware``
* ``const { mapState } = Component.getComponentHelper()`` is removed once every
  helper it binds has been rewritten
* ``...mapState('cart', ['items'])``             -> explicit ``items()`` accessors
* ``State.commit('cart/addItem', item)``         -> ``Store.get('cart').addItem(item)``
* any other ``Shopware.State`` access is reported for manual migration
"""

from typing import List

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import MemberPath, TrackedSymbol
from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.hooks import register_rule
from js_switcheroo.core.nodes import CallExpression, MemberExpression, SpreadElement, VariableDeclaration, VariableDeclarator
from js_switcheroo.core.shapes import (
  match_destructured_alias,
  match_direct_access,
  match_helper_import,
  match_path_call,
  match_spread_mapping,
)
from js_switcheroo.enums import Ruleset, Severity
from js_switcheroo.rules._common import RetiringRule, bound_names


class StoreMigrationSettings(BaseModel):
  """
  Names used by the state-to-store migration. Defaults match the platform.
  """

  store_root: str = Field("Shopware", description="Global namespace object.")
  legacy_member: str = Field("State", description="Deprecated member of the namespace.")
  store_member: str = Field("Store", description="Replacement member of the namespace.")
  store_getter: str = Field("get", description="Store lookup method.")
  mapping_helpers: List[str] = Field(default_factory=lambda: ["mapState", "mapGetters"])
  helper_namespace: str = Field("Component", description="Namespace of the helper factory.")
  helper_factory: str = Field("getComponentHelper", description="Factory returning the mapping helpers.")
  path_verbs: List[str] = Field(default_factory=lambda: ["commit", "dispatch"])


@register_rule(
  "no-shopware-store",
  Ruleset.ADMIN,
  min_version="6.7.0.0",
  fixable=True,
  description="Replace Shopware.State (Vuex) with Shopware.Store (Pinia).",
)
class NoShopwareStore(RetiringRule):
  settings_model = StoreMigrationSettings
  settings: StoreMigrationSettings

  @property
  def target(self) -> MemberPath:
    return MemberPath(self.settings.store_root, self.settings.legacy_member)

  def tracked_symbols(self) -> List[TrackedSymbol]:
    return [self.target]

  # --- B ---

  def visit_VariableDeclarator(self, node: VariableDeclarator) -> None:
    s = self.settings
    for match in match_destructured_alias(node, self.target):
      self.report(
        match.anchor,
        f"Do not use destructured '{s.legacy_member}', use destructured '{s.store_member}' instead.",
        fix=Fix.replace(match["key"], s.store_member),
      )

  # --- C ---

  def visit_VariableDeclaration(self, node: VariableDeclaration) -> None:
    s = self.settings
    match = match_helper_import(node, s.helper_namespace, s.helper_factory)
    if match is None:
      return
    self.retire(
      node,
      f"Remove the unused {s.helper_namespace}.{s.helper_factory}() import.",
      *bound_names(match["declarator"].id),
    )

  # --- D ---

  def visit_SpreadElement(self, node: SpreadElement) -> None:
    s = self.settings
    match = match_spread_mapping(node, s.mapping_helpers)
    if match is None:
      return
    synthesizer = self.context.synthesizer
    diagnostic = self.report(
      node,
      f"Replace spread {match['helper']} call with explicit computed property definitions.",
      fix=lambda: Fix.replace(node, synthesizer.store_accessors(match, s.store_root, s.store_member, s.store_getter)),
    )
    if diagnostic.fixable:
      self.consume(node, node.argument.callee)

  # --- E ---

  def visit_CallExpression(self, node: CallExpression) -> None:
    s = self.settings
    match = match_path_call(node, self.target, s.path_verbs, self.context.bindings)
    if match is None:
      return
    self.context.claim(match["receiver"])
    verb = match["verb"]
    synthesizer = self.context.synthesizer
    self.report(
      node,
      f"Replace {s.legacy_member}.{verb}/{self.target.path}.{verb} call with "
      f"{s.store_root}.{s.store_member}.{s.store_getter} call.",
      fix=lambda: Fix.replace(node, synthesizer.store_call(match, s.store_root, s.store_member, s.store_getter)),
    )

  # --- A ---

  def visit_MemberExpression(self, node: MemberExpression) -> None:
    if self.context.is_claimed(node):
      return
    match = match_direct_access(node, self.target)
    if match is None:
      return
    s = self.settings
    self.report(
      node,
      f"'{self.target.path}' is deprecated, migrate this usage to '{s.store_root}.{s.store_member}' manually.",
      severity=Severity.WARNING,
    )
