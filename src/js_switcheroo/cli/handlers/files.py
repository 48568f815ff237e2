"""
Source file discovery and ruleset selection shared by the CLI commands.
"""

from pathlib import Path
from typing import Dict, List, Tuple

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.engine import MigrationEngine
from js_switcheroo.enums import Ruleset

SOURCE_SUFFIXES = (".js", ".mjs", ".cjs", ".jsx", ".ts", ".tsx")
IGNORED_DIRS = ("node_modules", "dist", "vendor")
IGNORED_FILES = ("jest.config.js",)

RULESET_CHOICES = ("auto", "admin", "storefront", "all")


def is_ignored(path: Path) -> bool:
  """
  True for dependency folders, build output, e2e suites and tool configs.
  """
  parts = path.parts
  if any(part in IGNORED_DIRS for part in parts):
    return True
  if any(a == "test" and b == "e2e" for a, b in zip(parts, parts[1:])):
    return True
  return path.name in IGNORED_FILES


def collect_sources(path: Path) -> List[Path]:
  """
  Returns the script files below ``path`` (or ``path`` itself), sorted.
  """
  if path.is_file():
    return [path]
  files = []
  for candidate in path.rglob("*"):
    if not candidate.is_file() or candidate.suffix.lower() not in SOURCE_SUFFIXES:
      continue
    if is_ignored(candidate.relative_to(path)):
      continue
    files.append(candidate)
  return sorted(files)


def detect_rulesets(path: Path, choice: str) -> Tuple[Ruleset, ...]:
  """
  Resolves the ``--ruleset`` option for one file.

  ``auto`` picks the storefront rules below a ``storefront`` folder and the
  administration rules below ``administration``/``admin``; anything else gets both.
  """
  if choice == "admin":
    return (Ruleset.ADMIN,)
  if choice == "storefront":
    return (Ruleset.STOREFRONT,)
  if choice == "auto":
    parts = [part.lower() for part in path.parts]
    if "storefront" in parts:
      return (Ruleset.STOREFRONT,)
    if "administration" in parts or "admin" in parts:
      return (Ruleset.ADMIN,)
  return (Ruleset.ADMIN, Ruleset.STOREFRONT)


class EnginePool:
  """
  One engine per distinct ruleset selection, created on demand.
  """

  def __init__(self, config: RuntimeConfig, choice: str):
    self.config = config
    self.choice = choice
    self._engines: Dict[Tuple[Ruleset, ...], MigrationEngine] = {}

  def for_path(self, path: Path) -> MigrationEngine:
    rulesets = detect_rulesets(path, self.choice)
    if rulesets not in self._engines:
      config = self.config.model_copy(update={"rulesets": list(rulesets)})
      self._engines[rulesets] = MigrationEngine(config)
    return self._engines[rulesets]
