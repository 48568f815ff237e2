"""
Tests for version parsing and rule gating.
"""

import pytest

from js_switcheroo.core.errors import SwitcherooError
from js_switcheroo.core.versioning import compare_versions, is_active, parse_version


def test_parse_version():
  assert parse_version("6.7.0.0") == ((6, 7, 0, 0), None)
  assert parse_version("v6.5") == ((6, 5), None)
  assert parse_version("6.7.0.0-rc1") == ((6, 7, 0, 0), "rc1")


@pytest.mark.parametrize("value", ["", "abc", "six.seven"])
def test_parse_version_invalid(value):
  with pytest.raises(SwitcherooError):
    parse_version(value)


@pytest.mark.parametrize(
  "left, right, expected",
  [
    ("6.7", "6.7.0.0", 0),
    ("6.6.9.9", "6.7.0.0", -1),
    ("6.10.0.0", "6.9.0.0", 1),
    ("6.7.0.0-rc1", "6.7.0.0", -1),
    ("6.7.0.0", "6.7.0.0-rc1", 1),
    ("6.7.0.0-rc1", "6.7.0.0-rc2", -1),
  ],
)
def test_compare_versions(left, right, expected):
  assert compare_versions(left, right) == expected


def test_is_active():
  assert is_active(None, "6.5.0.0")
  assert is_active("6.7.0.0", None)
  assert is_active("6.7.0.0", "6.7.0.0")
  assert is_active("6.7.0.0", "6.8")
  assert not is_active("6.7.0.0", "6.6.99")
  assert not is_active("6.7.0.0", "6.7.0.0-rc3")
