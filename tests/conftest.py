"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Rule registry isolation so tests registering custom rules do not leak.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'js_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from js_switcheroo.config import RuntimeConfig  # noqa: E402
from js_switcheroo.core import hooks  # noqa: E402
from js_switcheroo.core.engine import MigrationEngine  # noqa: E402

# Load the built-in rules so they form the baseline restored after each test.
hooks.load_rules()


@pytest.fixture(autouse=True)
def isolate_rule_registry(monkeypatch):
  """
  Restores the rule registry after each test and hides the caller's
  SHOPWARE_VERSION so rule gating is deterministic.
  """
  monkeypatch.delenv("SHOPWARE_VERSION", raising=False)
  original = dict(hooks._RULES)
  loaded = hooks._RULES_LOADED
  yield
  hooks._RULES.clear()
  hooks._RULES.update(original)
  hooks._RULES_LOADED = loaded


@pytest.fixture
def config() -> RuntimeConfig:
  return RuntimeConfig()


@pytest.fixture
def engine(config) -> MigrationEngine:
  """An engine running every built-in rule."""
  return MigrationEngine(config)
