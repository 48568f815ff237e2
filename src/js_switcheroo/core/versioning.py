"""
Version gating.

Rules may declare the minimum platform version they apply to. Version strings are
dotted numbers (``6.7.0.0``) optionally followed by a pre-release tag
(``6.7.0.0-rc1``). Missing components compare as zero and a pre-release ranks
below the corresponding release.
"""

import re
from typing import Optional, Tuple

from js_switcheroo.core.errors import SwitcherooError

_VERSION_RE = re.compile(r"^\s*v?(\d+(?:\.\d+)*)(?:[-+.]?([0-9A-Za-z.\-]+))?\s*$")


def parse_version(v_str: str) -> Tuple[Tuple[int, ...], Optional[str]]:
  """
  Parses a version string into (numeric parts, pre-release tag).

  Raises:
      SwitcherooError: If the string does not start with a dotted number.
  """
  match = _VERSION_RE.match(v_str or "")
  if not match:
    raise SwitcherooError(f"Invalid version string: '{v_str}'")
  parts = tuple(int(t) for t in match.group(1).split("."))
  return parts, match.group(2)


def compare_versions(left: str, right: str) -> int:
  """
  Returns -1, 0 or 1 as ``left`` is lower, equal or higher than ``right``.
  """
  l_parts, l_tag = parse_version(left)
  r_parts, r_tag = parse_version(right)
  width = max(len(l_parts), len(r_parts))
  l_parts = l_parts + (0,) * (width - len(l_parts))
  r_parts = r_parts + (0,) * (width - len(r_parts))
  if l_parts != r_parts:
    return -1 if l_parts < r_parts else 1

  # Same release: a tagged build precedes the plain release.
  if l_tag == r_tag:
    return 0
  if l_tag is None:
    return 1
  if r_tag is None:
    return -1
  return -1 if l_tag < r_tag else 1


def is_active(min_version: Optional[str], current: Optional[str]) -> bool:
  """
  Whether a rule gated on ``min_version`` applies to the ``current`` version.

  Ungated rules, and every rule when no version is configured, are active.
  """
  if not min_version or not current:
    return True
  return compare_versions(current, min_version) >= 0
