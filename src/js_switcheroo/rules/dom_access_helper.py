"""
Rule: shopware-storefront/no-dom-access-helper

Replaces ``DomAccessHelper`` calls with the native DOM API:

* ``DomAccessHelper.querySelector(el, '.x')``      -> ``el.querySelector('.x')``
  (likewise ``querySelectorAll``, ``getAttribute`` and ``hasAttribute``)
* ``DomAccessHelper.getDataAttribute(el, 'data-foo-bar')`` -> ``el.dataset.fooBar``

The helper import is removed once no other use of it remains.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

from js_switcheroo.analysis.bindings import ModuleImport, TrackedSymbol
from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.errors import SynthesisError
from js_switcheroo.core.hooks import register_rule
from js_switcheroo.core.nodes import (
  CallExpression,
  ImportDeclaration,
  ImportDefaultSpecifier,
  MemberExpression,
  is_identifier,
  is_string_literal,
  static_property_name,
)
from js_switcheroo.core.synthesizer import member_access
from js_switcheroo.enums import Ruleset
from js_switcheroo.rules._common import RetiringRule, import_source

NATIVE_METHODS = ("querySelector", "querySelectorAll", "getAttribute", "hasAttribute")
DATA_PREFIX_RE = re.compile(r"^data-?")


def dataset_key(attribute: str) -> str:
  """
  ``'data-foo-bar'`` -> ``'fooBar'``, the ``dataset`` property of the attribute.
  """
  name = DATA_PREFIX_RE.sub("", attribute)
  return re.sub(r"-([a-z])", lambda m: m.group(1).upper(), name.lower())


class DomAccessHelperSettings(BaseModel):
  helper_module: str = Field("src/helper/dom-access.helper")
  helper_name: str = Field("DomAccessHelper", description="Name used when the import is not in the unit.")


@register_rule(
  "no-dom-access-helper",
  Ruleset.STOREFRONT,
  fixable=True,
  description="Replace DomAccessHelper methods with native DOM methods.",
)
class NoDomAccessHelper(RetiringRule):
  settings_model = DomAccessHelperSettings
  settings: DomAccessHelperSettings

  @property
  def module(self) -> ModuleImport:
    return ModuleImport(self.settings.helper_module)

  def tracked_symbols(self) -> List[TrackedSymbol]:
    return [self.module]

  def visit_ImportDeclaration(self, node: ImportDeclaration) -> None:
    if import_source(node) != self.settings.helper_module:
      return
    names = [spec.local.name for spec in node.specifiers if isinstance(spec, ImportDefaultSpecifier)]
    self.retire(node, "Use native DOM methods instead of DomAccessHelper", *names)

  def _helper_name(self, receiver) -> Optional[str]:
    entry = self.context.bindings.resolve(receiver, self.module.path)
    if entry is not None:
      return entry.local_name
    if is_identifier(receiver, self.settings.helper_name):
      return self.settings.helper_name
    return None

  def _native_call(self, method: str, node: CallExpression) -> str:
    synthesizer = self.context.synthesizer
    element = synthesizer.source_text(node.arguments[0])
    argument = node.arguments[1]
    if method == "getDataAttribute":
      if not is_string_literal(argument):
        raise SynthesisError("Dynamic data attribute names cannot be mapped to a dataset key")
      key = dataset_key(argument.value)
      if not key:
        raise SynthesisError("Empty dataset key")
      return f"{element}.dataset{member_access(key)}"
    return f"{element}.{method}({synthesizer.source_text(argument)})"

  def visit_CallExpression(self, node: CallExpression) -> None:
    callee = node.callee
    if not isinstance(callee, MemberExpression) or callee.computed:
      return
    name = self._helper_name(callee.object)
    if name is None:
      return
    method = static_property_name(callee)
    if method not in NATIVE_METHODS and method != "getDataAttribute":
      return
    if len(node.arguments) < 2:
      return

    diagnostic = self.report(
      node,
      f"Use native DOM method instead of {name}.{method}",
      fix=lambda: Fix.replace(node, self._native_call(method, node)),
    )
    if diagnostic.fixable:
      self.consume(node, callee.object)
