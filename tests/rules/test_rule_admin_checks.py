"""
Tests for the advisory administration rules:

* shopware-admin/no-sw-extension-override
* shopware-admin/no-snippet-import
* shopware-admin/no-src-import
"""

import pytest

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.engine import MigrationEngine
from js_switcheroo.enums import Severity
from js_switcheroo.rules.extension_override import NoSwExtensionOverride
from js_switcheroo.rules.snippet_import import MESSAGE as SNIPPET_MESSAGE
from js_switcheroo.rules.snippet_import import NoSnippetImport
from js_switcheroo.rules.src_import import NoSrcImport


def findings(rule, code: str):
  return MigrationEngine(RuntimeConfig(), rules=[rule]).run(code).diagnostics


# --- no-sw-extension-override ---


@pytest.mark.parametrize(
  "code",
  [
    "Shopware.Component.override('sw-extension-store-landing-page', {});",
    "const { Component } = Shopware;\nComponent.override('sw-extension-card-base', {});",
    "const C = Shopware.Component;\nC.override('sw-extension-my-apps', {});",
  ],
)
def test_extension_override_reported(code):
  diagnostics = findings(NoSwExtensionOverride, code)

  assert len(diagnostics) == 1
  assert diagnostics[0].message == "Changing the Shopware Extension Manager is not allowed"
  assert diagnostics[0].fix is None


@pytest.mark.parametrize(
  "code",
  [
    "Shopware.Component.override('sw-product-detail', {});",
    "Shopware.Component.register('sw-extension-foo', {});",
    "Other.override('sw-extension-foo', {});",
    "Shopware.Component.override(name, {});",
  ],
)
def test_extension_override_ignored(code):
  assert findings(NoSwExtensionOverride, code) == []


# --- no-snippet-import ---


def test_snippet_import_reported_on_property():
  code = "Shopware.Module.register('swag-example', {\n    type: 'plugin',\n    snippets: { 'de-DE': deDE },\n});"
  diagnostics = findings(NoSnippetImport, code)

  assert len(diagnostics) == 1
  assert diagnostics[0].message == SNIPPET_MESSAGE
  assert diagnostics[0].line == 3


def test_snippet_import_short_module_name():
  assert len(findings(NoSnippetImport, "Module.register('x', { snippets });")) == 1


@pytest.mark.parametrize(
  "code",
  [
    "Shopware.Module.register('x', { type: 'plugin' });",
    "Shopware.Component.register('x', { snippets: {} });",
    "Shopware.Module.register('x', options);",
  ],
)
def test_snippet_import_ignored(code):
  assert findings(NoSnippetImport, code) == []


# --- no-src-import ---


def test_src_import_reported():
  diagnostics = findings(NoSrcImport, "import { Mixin } from '@administration/app/mixin';")

  assert len(diagnostics) == 1
  assert diagnostics[0].severity is Severity.ERROR
  assert diagnostics[0].message.startswith(
    "You can't use imports directly from the Shopware Core via \"@administration/app/mixin\"."
  )


def test_src_import_ignores_other_modules():
  assert findings(NoSrcImport, "import template from './sw-foo.html.twig';") == []
