"""
Tests for shopware-admin/no-shopware-store.

Covers every usage shape of the state-to-store migration through the engine:
destructured aliases, the helper import, spread mappings, path calls and the
advisory for any other direct access.
"""

import pytest

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.engine import MigrationEngine
from js_switcheroo.enums import Severity
from js_switcheroo.rules.store_migration import NoShopwareStore

RULE_ID = "shopware-admin/no-shopware-store"


@pytest.fixture
def store_engine() -> MigrationEngine:
  return MigrationEngine(RuntimeConfig(), rules=[NoShopwareStore])


def test_destructured_alias(store_engine):
  result = store_engine.run("const { State } = Shopware;")
  diagnostic = result.diagnostics[0]

  assert len(result.diagnostics) == 1
  assert diagnostic.rule_id == RULE_ID
  assert diagnostic.message == "Do not use destructured 'State', use destructured 'Store' instead."
  assert (diagnostic.fix.start, diagnostic.fix.end, diagnostic.fix.text) == (8, 13, "Store")
  assert store_engine.fix("const { State } = Shopware;").code == "const { Store } = Shopware;"


def test_destructured_alias_renamed(store_engine):
  result = store_engine.fix("const { State: S, Component } = Shopware;")
  assert result.code == "const { Store: S, Component } = Shopware;"


def test_helper_import_is_removed(store_engine):
  code = (
    "const { mapState } = Component.getComponentHelper();\n"
    "\n"
    "export default {\n"
    "    computed: {\n"
    "        ...mapState('cart', ['items']),\n"
    "    },\n"
    "};\n"
  )
  result = store_engine.run(code)
  messages = [d.message for d in result.diagnostics]

  assert messages[0] == "Remove the unused Component.getComponentHelper() import."
  assert messages[1] == "Replace spread mapState call with explicit computed property definitions."

  assert store_engine.fix(code).code == (
    "\n"
    "export default {\n"
    "    computed: {\n"
    "        items() {\n"
    "            return Shopware.Store.get('cart').items;\n"
    "        },\n"
    "    },\n"
    "};\n"
  )


def test_helper_import_kept_while_a_helper_is_used(store_engine):
  code = (
    "const { mapState, mapActions } = Component.getComponentHelper();\n"
    "\n"
    "export default {\n"
    "    computed: {\n"
    "        ...mapState('cart', ['items']),\n"
    "    },\n"
    "    methods: {\n"
    "        ...mapActions('cart', ['add']),\n"
    "    },\n"
    "};\n"
  )
  result = store_engine.fix(code)

  assert result.code.startswith("const { mapState, mapActions } = Component.getComponentHelper();\n")
  assert "return Shopware.Store.get('cart').items;" in result.code
  assert "...mapActions('cart', ['add'])" in result.code
  assert [d.message for d in result.diagnostics] == ["Remove the unused Component.getComponentHelper() import."]
  assert not result.diagnostics[0].fixable


def test_helper_import_kept_when_mapping_is_advisory(store_engine):
  code = (
    "const { mapState } = Component.getComponentHelper();\n"
    "export default { computed: { ...mapState('cart', [name]) } };\n"
  )
  result = store_engine.fix(code)

  assert result.code == code
  assert not any(d.fixable for d in result.diagnostics)


def test_spread_outside_object_literal_is_ignored(store_engine):
  code = "Shopware.State.commit('cart/add', x);\nfoo(...mapGetters('cart', ['a']));\n"
  result = store_engine.fix(code)

  assert result.errors == []
  assert result.code == "Shopware.Store.get('cart').add(x);\nfoo(...mapGetters('cart', ['a']));\n"
  assert result.diagnostics == []


def test_findings_follow_source_order(store_engine):
  code = (
    "const { State } = Shopware;\n"
    "const { mapState } = Component.getComponentHelper();\n"
    "export default {\n"
    "    computed: { ...mapState('cart', ['items']) },\n"
    "    created() { State.commit('cart/load'); },\n"
    "};\n"
  )
  diagnostics = store_engine.run(code).diagnostics

  assert [d.line for d in diagnostics] == [1, 2, 4, 5]
  assert all(d.fixable for d in diagnostics)


def test_spread_mapping_two_accessors(store_engine):
  code = "export default {\n    computed: {\n        ...mapState('cart', ['items', 'total']),\n    },\n};\n"
  fix = store_engine.run(code).diagnostics[0].fix

  assert fix.text == (
    "items() {\n"
    "            return Shopware.Store.get('cart').items;\n"
    "        },\n"
    "        total() {\n"
    "            return Shopware.Store.get('cart').total;\n"
    "        }"
  )
  assert not fix.text.rstrip().endswith(",")


def test_spread_mapping_getters_object_form(store_engine):
  code = "x = {\n    ...mapGetters('cart', { count: 'itemCount' }),\n};\n"
  assert store_engine.fix(code).code == (
    "x = {\n    count() {\n        return Shopware.Store.get('cart').itemCount;\n    },\n};\n"
  )


def test_spread_mapping_without_entries_is_advisory(store_engine):
  result = store_engine.run("x = { ...mapState('cart', [name]) };")

  assert len(result.diagnostics) == 1
  assert not result.diagnostics[0].fixable


def test_path_call_short_alias(store_engine):
  result = store_engine.run("State.commit('cart/addItem', payload);")
  diagnostic = result.diagnostics[0]

  assert diagnostic.message == "Replace State.commit/Shopware.State.commit call with Shopware.Store.get call."
  assert diagnostic.fix.text == "Store.get('cart').addItem(payload)"


def test_path_call_qualified_claims_receiver(store_engine):
  result = store_engine.run("Shopware.State.dispatch('cart/load', { id: 1 });")

  # The receiver is not additionally reported as a direct access.
  assert len(result.diagnostics) == 1
  assert result.diagnostics[0].message.startswith("Replace State.dispatch/Shopware.State.dispatch call")
  assert result.diagnostics[0].fix.text == "Shopware.Store.get('cart').load({ id: 1 })"


def test_path_call_assigned_alias(store_engine):
  code = "const s = Shopware.State;\ns.commit('cart/add');\n"
  result = store_engine.fix(code)

  assert result.code == "const s = Shopware.State;\nShopware.Store.get('cart').add();\n"
  # Only the direct access in the declaration is left, for manual migration.
  assert [d.severity for d in result.diagnostics] == [Severity.WARNING]


def test_path_call_dynamic_path_is_ignored(store_engine):
  assert store_engine.run("State.commit(path, payload);").diagnostics == []


def test_direct_access_is_advisory_warning(store_engine):
  result = store_engine.run("Shopware.State.registerModule('cart', module);")
  diagnostic = result.diagnostics[0]

  assert len(result.diagnostics) == 1
  assert diagnostic.severity is Severity.WARNING
  assert diagnostic.message == "'Shopware.State' is deprecated, migrate this usage to 'Shopware.Store' manually."
  assert diagnostic.fix is None


def test_full_component(store_engine):
  code = (
    "const { State } = Shopware;\n"
    "const { mapState } = Component.getComponentHelper();\n"
    "\n"
    "export default {\n"
    "    computed: {\n"
    "        ...mapState('swCart', ['items']),\n"
    "    },\n"
    "    methods: {\n"
    "        add(item) {\n"
    "            State.commit('swCart/addItem', item);\n"
    "        },\n"
    "    },\n"
    "};\n"
  )
  result = store_engine.fix(code)

  assert result.diagnostics == []
  assert result.code == (
    "const { Store } = Shopware;\n"
    "\n"
    "export default {\n"
    "    computed: {\n"
    "        items() {\n"
    "            return Shopware.Store.get('swCart').items;\n"
    "        },\n"
    "    },\n"
    "    methods: {\n"
    "        add(item) {\n"
    "            Store.get('swCart').addItem(item);\n"
    "        },\n"
    "    },\n"
    "};\n"
  )


def test_fix_is_idempotent(store_engine):
  code = "const { State } = Shopware;\nState.commit('cart/add', 1);\nShopware.State.foo;\n"
  once = store_engine.fix(code).code
  assert store_engine.fix(once).code == once


def test_version_gate():
  config = RuntimeConfig(version="6.6.9.0")
  assert MigrationEngine(config).run("const { State } = Shopware;").diagnostics == []
