"""
Tests for the command line interface.

Verifies:
1. Argument parsing and dispatch to the handlers.
2. `lint` output (JSON mode) and exit codes.
3. `fix` in place and with `--dry-run`.
4. `rules` listing.
5. Source discovery and ruleset detection.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from js_switcheroo.cli.__main__ import main
from js_switcheroo.cli.handlers.files import EnginePool, collect_sources, detect_rulesets, is_ignored
from js_switcheroo.cli.handlers.fix import unified_diff
from js_switcheroo.cli.handlers.rules import handle_rules
from js_switcheroo.config import RuntimeConfig
from js_switcheroo.enums import Ruleset
from js_switcheroo.utils.console import reset_console, set_console

ADMIN_CODE = "const { State } = Shopware;\n"


@pytest.fixture
def recorded():
  """Routes CLI output and logging into a recording console."""
  backend = Console(record=True, width=200, color_system=None)
  set_console(backend)
  yield backend
  reset_console()


def write(path: Path, text: str) -> Path:
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(text, encoding="utf-8")
  return path


# --- Dispatch ---


def test_lint_dispatch():
  with patch("js_switcheroo.cli.handlers.handle_lint", return_value=0) as mock_lint:
    ret = main(["lint", "src", "--ruleset", "admin", "--shopware-version", "6.7", "--config", "store_root=Sw"])

  assert ret == 0
  mock_lint.assert_called_once_with(Path("src"), "admin", "6.7", False, {"store_root": "Sw"})


def test_fix_dispatch():
  with patch("js_switcheroo.cli.handlers.handle_fix", return_value=1) as mock_fix:
    ret = main(["fix", "src", "--dry-run"])

  assert ret == 1
  mock_fix.assert_called_once_with(Path("src"), "auto", None, True, {})


def test_version_flag(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(["--version"])

  assert excinfo.value.code == 0
  assert "0.1.0" in capsys.readouterr().out


def test_invalid_ruleset_exits():
  with pytest.raises(SystemExit):
    main(["lint", "src", "--ruleset", "backend"])


# --- lint ---


def test_lint_json(tmp_path, capsys):
  source = write(tmp_path / "administration" / "index.js", ADMIN_CODE)

  ret = main(["lint", str(source), "--json"])
  report = json.loads(capsys.readouterr().out)

  assert ret == 1
  assert report[0]["filePath"] == str(source)
  message = report[0]["messages"][0]
  assert message["ruleId"] == "shopware-admin/no-shopware-store"
  assert message["severity"] == 2
  assert message["fix"] == {"range": [8, 13], "text": "Store"}


def test_lint_warnings_only_succeed(tmp_path, capsys):
  source = write(tmp_path / "index.js", "Shopware.State.foo;\n")

  assert main(["lint", str(source), "--json"]) == 0
  assert json.loads(capsys.readouterr().out)[0]["warningCount"] == 1


def test_lint_version_gate(tmp_path, capsys):
  source = write(tmp_path / "index.js", ADMIN_CODE)

  assert main(["lint", str(source), "--json", "--shopware-version", "6.6.0.0"]) == 0
  assert json.loads(capsys.readouterr().out)[0]["messages"] == []


def test_lint_parse_error(tmp_path, capsys):
  source = write(tmp_path / "broken.js", "const = ;\n")

  assert main(["lint", str(source), "--json"]) == 1
  message = json.loads(capsys.readouterr().out)[0]["messages"][0]
  assert message["fatal"] is True


def test_lint_table(tmp_path, recorded):
  write(tmp_path / "storefront" / "plugin.js", "const c = new HttpClient();\nc.get(u, r => r);\n")

  assert main(["lint", str(tmp_path)]) == 1
  output = recorded.export_text()
  assert "Use fetch API instead of c.get" in output
  assert "Summary:" in output


def test_lint_missing_input(tmp_path, recorded):
  assert main(["lint", str(tmp_path / "nope")]) == 1
  assert "Input not found" in recorded.export_text()


def test_lint_invalid_config(tmp_path, recorded):
  source = write(tmp_path / "index.js", ADMIN_CODE)

  assert main(["lint", str(source), "--config", "store_root=5"]) == 1
  assert "Invalid configuration" in recorded.export_text()


def test_lint_reads_pyproject(tmp_path, capsys):
  write(tmp_path / "pyproject.toml", '[tool.js_switcheroo]\ndisabled_rules = ["no-shopware-store"]\n')
  source = write(tmp_path / "index.js", ADMIN_CODE)

  assert main(["lint", str(source), "--json"]) == 0
  assert json.loads(capsys.readouterr().out)[0]["messages"] == []


# --- fix ---


def test_fix_in_place(tmp_path, recorded):
  source = write(tmp_path / "administration" / "index.js", ADMIN_CODE + "State.commit('cart/add', item);\n")

  assert main(["fix", str(tmp_path)]) == 0
  assert source.read_text(encoding="utf-8") == "const { Store } = Shopware;\nStore.get('cart').add(item);\n"
  assert "Migrated 1 of 1 files" in recorded.export_text()


def test_fix_dry_run_leaves_files(tmp_path, recorded):
  source = write(tmp_path / "index.js", ADMIN_CODE)

  assert main(["fix", str(source), "--dry-run"]) == 0
  assert source.read_text(encoding="utf-8") == ADMIN_CODE
  output = recorded.export_text()
  assert "+const { Store } = Shopware;" in output
  assert "Would migrate 1 of 1 files" in output


def test_fix_reports_remaining_errors(tmp_path, recorded):
  source = write(tmp_path / "storefront" / "a.js", "const c = new HttpClient();\nc.get('/a', ok => ok, fail => fail);\n")

  assert main(["fix", str(tmp_path)]) == 1
  assert source.read_text(encoding="utf-8").startswith("const c = new HttpClient();")


def test_unified_diff():
  diff = unified_diff("a\nb\n", "a\nc\n", "x.js")

  assert diff.startswith("--- a/x.js\n+++ b/x.js\n")
  assert "-b\n+c\n" in diff


# --- rules ---


def test_rules_listing(recorded):
  assert handle_rules() == 0
  output = recorded.export_text()

  assert "shopware-admin/no-shopware-store" in output
  assert "6.7.0.0" in output
  assert "shopware-storefront/no-http-client" in output


def test_rules_command_dispatch():
  with patch("js_switcheroo.cli.handlers.handle_rules", return_value=0) as mock_rules:
    assert main(["rules"]) == 0
  mock_rules.assert_called_once_with()


# --- Discovery ---


def test_collect_sources(tmp_path):
  keep = [
    write(tmp_path / "src" / "main.js", ""),
    write(tmp_path / "src" / "view.tsx", ""),
    write(tmp_path / "test" / "unit.spec.ts", ""),
  ]
  write(tmp_path / "node_modules" / "lib" / "index.js", "")
  write(tmp_path / "dist" / "bundle.js", "")
  write(tmp_path / "test" / "e2e" / "cart.cy.js", "")
  write(tmp_path / "jest.config.js", "")
  write(tmp_path / "src" / "style.scss", "")

  assert collect_sources(tmp_path) == sorted(keep)
  assert collect_sources(keep[0]) == [keep[0]]


def test_is_ignored():
  assert is_ignored(Path("a/node_modules/b.js"))
  assert is_ignored(Path("test/e2e/x.js"))
  assert not is_ignored(Path("e2e/test/x.js"))


@pytest.mark.parametrize(
  "path, choice, expected",
  [
    ("app/storefront/src/main.js", "auto", (Ruleset.STOREFRONT,)),
    ("app/administration/src/main.js", "auto", (Ruleset.ADMIN,)),
    ("src/main.js", "auto", (Ruleset.ADMIN, Ruleset.STOREFRONT)),
    ("app/storefront/src/main.js", "admin", (Ruleset.ADMIN,)),
    ("src/main.js", "storefront", (Ruleset.STOREFRONT,)),
    ("app/storefront/src/main.js", "all", (Ruleset.ADMIN, Ruleset.STOREFRONT)),
  ],
)
def test_detect_rulesets(path, choice, expected):
  assert detect_rulesets(Path(path), choice) == expected


def test_engine_pool_reuses_engines():
  pool = EnginePool(RuntimeConfig(), "auto")
  a = pool.for_path(Path("storefront/a.js"))
  b = pool.for_path(Path("storefront/b.js"))
  admin = pool.for_path(Path("administration/c.js"))

  assert a is b
  assert a is not admin
  assert all(cls.meta.ruleset is Ruleset.STOREFRONT for cls in a.rules)
