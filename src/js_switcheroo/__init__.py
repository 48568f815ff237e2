"""
js-switcheroo Package.

A source-to-source migration engine for Shopware extension JavaScript. It
detects deprecated API usage (``Shopware.State`` and the Vuex helpers, the
callback ``HttpClient``, storefront helpers replaced by native APIs) and
rewrites it in place.

Usage
-----

.. code-block:: python

    import js_switcheroo as jss

    code = "const { State } = Shopware;"
    print(jss.fix(code))
    # const { Store } = Shopware;

    result = jss.lint(code)
    for diagnostic in result.diagnostics:
        print(diagnostic.line, diagnostic.message)
"""

from typing import Any, Dict, Optional

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.engine import MigrationEngine
from js_switcheroo.core.migration_result import MigrationResult

__version__ = "0.1.0"


def lint(
  code: str,
  version: Optional[str] = None,
  path: Optional[str] = None,
  rule_settings: Optional[Dict[str, Any]] = None,
) -> MigrationResult:
  """
  Reports deprecated usages in a string of JavaScript.

  Args:
      code (str): The source code to check.
      version (str, optional): Platform version; rules requiring a newer version
          are skipped. All rules run when omitted.
      path (str, optional): File name used for messages and grammar selection.
      rule_settings (dict, optional): Settings passed to rules.

  Returns:
      MigrationResult: The findings, in source order.
  """
  config = RuntimeConfig(version=version, rule_settings=rule_settings or {})
  return MigrationEngine(config).run(code, path=path)


def fix(
  code: str,
  version: Optional[str] = None,
  path: Optional[str] = None,
  rule_settings: Optional[Dict[str, Any]] = None,
) -> str:
  """
  Rewrites deprecated usages in a string of JavaScript.

  Raises:
      ValueError: If the code cannot be parsed.
  """
  config = RuntimeConfig(version=version, rule_settings=rule_settings or {})
  result = MigrationEngine(config).fix(code, path=path)
  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Migration failed:\n{error_msg}")
  return result.code


__all__ = [
  "MigrationEngine",
  "MigrationResult",
  "RuntimeConfig",
  "fix",
  "lint",
  "__version__",
]
