"""
Enumerations for js-switcheroo.

This module defines the standard enumerations shared by the engine, the rule
packs and the CLI.
"""

from enum import Enum


class Severity(str, Enum):
  """
  Severity of a reported finding.

  Mirrors ESLint's numeric levels for JSON output (1 = warning, 2 = error).
  """

  WARNING = "warning"
  ERROR = "error"

  @property
  def level(self) -> int:
    return 2 if self is Severity.ERROR else 1


class Ruleset(str, Enum):
  """
  Rule packs, selected per source tree (administration vs storefront code).
  """

  ADMIN = "admin"
  STOREFRONT = "storefront"


class Shape(str, Enum):
  """
  Deprecated usage shapes recognised by `js_switcheroo.core.shapes`.
  """

  DIRECT_ACCESS = "direct_access"  # Root.Sub used as a value
  DESTRUCTURED_ALIAS = "destructured_alias"  # const { Sub } = Root
  HELPER_IMPORT = "helper_import"  # const { .. } = Namespace.getHelper()
  SPREAD_MAPPING = "spread_mapping"  # ...mapState('key', [..] | {..})
  PATH_CALL = "path_call"  # Root.Sub.commit('target/action', ...)
  CALLBACK_CALL = "callback_call"  # client.get(url, res => ...)


class BindingForm(str, Enum):
  """
  How a local name came to alias a tracked symbol.
  """

  DESTRUCTURED = "destructured"  # const { Sub: local } = Root
  ASSIGNED = "assigned"  # local = Root.Sub
  CONSTRUCTED = "constructed"  # local = new Class()
  IMPORTED = "imported"  # import local from 'module'
