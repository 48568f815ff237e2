"""
Tests for shopware-storefront/no-http-client.

Covers the callback-to-promise rewrite of ``get`` and ``post`` calls and the
removal of the client import and construction once no use of the client is left.
"""

import pytest

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.engine import MigrationEngine
from js_switcheroo.rules.http_client import NoHttpClient

RULE_ID = "shopware-storefront/no-http-client"

PLUGIN = """import Plugin from 'src/plugin-system/plugin.class';
import HttpClient from 'src/service/http-client.service';

export default class CartWidget extends Plugin {
    init() {
        this._client = new HttpClient();
    }

    load(data) {
        this._client.post('/widgets/checkout/info', JSON.stringify(data), (response) => {
            this.el.innerHTML = response;
        }, 'application/json');
    }
}
"""

PLUGIN_FIXED = """import Plugin from 'src/plugin-system/plugin.class';

export default class CartWidget extends Plugin {
    init() {
    }

    load(data) {
        fetch('/widgets/checkout/info', {
            method: 'POST',
            headers: {
                'Content-Type': 'application/json'
            },
            body: JSON.stringify(data)
        })
            .then(response => response.text())
            .then((response) => {
                this.el.innerHTML = response;
            });
    }
}
"""


@pytest.fixture
def http_engine() -> MigrationEngine:
  return MigrationEngine(RuntimeConfig(), rules=[NoHttpClient])


def test_get_call_scenario(http_engine):
  code = "this.client = new HttpClient();\nthis.client.get(url, res => console.log(res));\n"
  result = http_engine.run(code)
  assignment, call = result.diagnostics

  assert call.rule_id == RULE_ID
  assert call.message == "Use fetch API instead of this.client.get"
  assert call.fix.text == (
    "fetch(url)\n"
    "    .then(response => response.text())\n"
    "    .then((res) => {\n"
    "        return console.log(res);\n"
    "    })"
  )
  assert assignment.message == "Remove HttpClient assignment for 'this.client' as fetch will be used instead."
  assert assignment.fixable

  assert http_engine.fix(code).code == (
    "fetch(url)\n"
    "    .then(response => response.text())\n"
    "    .then((res) => {\n"
    "        return console.log(res);\n"
    "    });\n"
  )


def test_plugin_class(http_engine):
  result = http_engine.fix(PLUGIN)

  assert result.code == PLUGIN_FIXED
  assert result.diagnostics == []


def test_plugin_findings(http_engine):
  messages = [d.message for d in http_engine.run(PLUGIN).diagnostics]

  assert messages == [
    "Remove HttpClient import as fetch will be used instead",
    "Remove HttpClient assignment for 'this._client' as fetch will be used instead.",
    "Use fetch API instead of this._client.post",
  ]


def test_local_variable_client(http_engine):
  code = "const client = new HttpClient();\nclient.get('/a', (r) => {\n    render(r);\n});\n"
  result = http_engine.fix(code)

  assert result.code == (
    "fetch('/a')\n"
    "    .then(response => response.text())\n"
    "    .then((r) => {\n"
    "        render(r);\n"
    "    });\n"
  )


def test_remaining_use_keeps_declaration(http_engine):
  code = "const client = new HttpClient();\nclient.get('/a', r => r);\nclient.abort();\n"
  result = http_engine.fix(code)

  assert result.code.startswith("const client = new HttpClient();\nfetch('/a')")
  remaining = [d for d in result.diagnostics if d.message.startswith("Remove HttpClient assignment")]
  assert len(remaining) == 1
  assert not remaining[0].fixable


def test_ambiguous_callbacks_are_not_rewritten(http_engine):
  code = "const client = new HttpClient();\nclient.get('/a', ok => ok, fail => fail);\n"
  result = http_engine.fix(code)

  assert result.code == code
  assert len(result.diagnostics) == 1
  assert not result.diagnostics[0].fixable


def test_nested_calls_in_callback(http_engine):
  code = (
    "const client = new HttpClient();\n"
    "client.get('/a', (a) => {\n"
    "    client.get('/b', b => b);\n"
    "});\n"
  )
  result = http_engine.fix(code)

  assert "client" not in result.code
  assert result.code.count("fetch(") == 2
  assert result.diagnostics == []


def test_multiple_declarators_are_advisory(http_engine):
  code = "const a = new HttpClient(), b = 1;\n"
  result = http_engine.fix(code)

  assert result.code == code
  assert not result.diagnostics[0].fixable


def test_untracked_receiver_is_ignored(http_engine):
  assert http_engine.run("api.get('/a', r => r);").diagnostics == []


def test_custom_transport():
  engine = MigrationEngine(RuntimeConfig(rule_settings={"fetch_function": "window.fetch"}), rules=[NoHttpClient])
  code = "const c = new HttpClient();\nc.get(u, r => r);\n"

  assert engine.fix(code).code.startswith("window.fetch(u)\n")


def test_findings_follow_source_order(http_engine):
  code = (
    "import HttpClient from 'src/service/http-client.service';\n"
    "const client = new HttpClient();\n"
    "client.get('/x', res => render(res));\n"
  )
  diagnostics = http_engine.run(code).diagnostics

  assert [d.line for d in diagnostics] == [1, 2, 3]
  # Deletions are attached after the walk, once the call is known to be rewritten.
  assert all(d.fixable for d in diagnostics)
  assert http_engine.fix(code).code == (
    "fetch('/x')\n"
    "    .then(response => response.text())\n"
    "    .then((res) => {\n"
    "        return render(res);\n"
    "    });\n"
  )
