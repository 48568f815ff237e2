"""
Runtime Configuration Store.

Resolves the settings of a migration run from three layers, lowest precedence
first: the ``[tool.js_switcheroo]`` table of the nearest ``pyproject.toml``, the
``SHOPWARE_VERSION`` environment variable, and explicit (CLI) arguments.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from js_switcheroo.core.versioning import parse_version
from js_switcheroo.enums import Ruleset

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

T = TypeVar("T", bound=BaseModel)

VERSION_ENV_VAR = "SHOPWARE_VERSION"
TOOL_SECTION = "js_switcheroo"

logger = logging.getLogger(__name__)


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the migration engine.
  """

  version: Optional[str] = Field(None, description="Target platform version; rules above it are disabled.")
  rulesets: List[Ruleset] = Field(
    default_factory=lambda: [Ruleset.ADMIN, Ruleset.STOREFRONT],
    description="Rule packs to run.",
  )
  disabled_rules: List[str] = Field(default_factory=list, description="Rule ids to skip.")
  rule_settings: Dict[str, Any] = Field(default_factory=dict, description="Configuration passed to rules.")
  max_fix_passes: int = Field(10, ge=1, description="Upper bound of parse/fix iterations.")

  @field_validator("version")
  @classmethod
  def validate_version(cls, v: Optional[str]) -> Optional[str]:
    """
    Rejects strings that are not dotted version numbers.

    Raises:
        ValueError: If the version cannot be parsed.
    """
    if v is None or not v.strip():
      return None
    try:
      parse_version(v)
    except Exception as e:
      raise ValueError(str(e))
    return v.strip()

  def parse_rule_settings(self, schema: Type[T]) -> T:
    """
    Validates the raw rule settings dictionary against a specific Pydantic model.
    """
    try:
      return schema.model_validate(self.rule_settings)
    except ValidationError as e:
      raise ValueError(f"Rule configuration validation failed: {e}")

  @classmethod
  def load(
    cls,
    version: Optional[str] = None,
    rulesets: Optional[List[Ruleset]] = None,
    disabled_rules: Optional[List[str]] = None,
    rule_settings: Optional[Dict[str, Any]] = None,
    max_fix_passes: Optional[int] = None,
    search_path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and the environment, then applies
    explicit overrides.

    Args:
        version: Override for the platform version.
        rulesets: Override for the rule packs.
        disabled_rules: Additional rule ids to disable.
        rule_settings: Additional rule settings (merged over the TOML ones).
        max_fix_passes: Override for the fix iteration bound.
        search_path: Directory to start searching for TOML config.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    env = os.environ if environ is None else environ
    toml_config, toml_dir = _load_toml_settings(search_path or Path.cwd())
    if toml_dir:
      logger.debug(f"Loaded [tool.{TOOL_SECTION}] from {toml_dir}")

    final_version = version or env.get(VERSION_ENV_VAR) or toml_config.get("version")

    final_rulesets = rulesets
    if final_rulesets is None and "rulesets" in toml_config:
      final_rulesets = [Ruleset(r) for r in toml_config["rulesets"]]

    final_disabled = list(toml_config.get("disabled_rules", []))
    for rule_id in disabled_rules or []:
      if rule_id not in final_disabled:
        final_disabled.append(rule_id)

    final_settings = {**toml_config.get("rule_settings", {}), **(rule_settings or {})}

    data: Dict[str, Any] = {
      "version": final_version,
      "disabled_rules": final_disabled,
      "rule_settings": final_settings,
      "max_fix_passes": max_fix_passes or toml_config.get("max_fix_passes", 10),
    }
    if final_rulesets is not None:
      data["rulesets"] = final_rulesets
    return cls(**data)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches parents for 'pyproject.toml' and extracts the tool section.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()
  if current.is_file():
    current = current.parent

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring unreadable {toml_path}: {e}")
        return {}, None
      return data.get("tool", {}).get(TOOL_SECTION, {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Types are inferred (int, float, bool, comma separated list, or string).

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config = {}
  for item in items:
    if "=" not in item:
      logger.warning(f"Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str

    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    elif "," in val_str:
      final_val = [part.strip() for part in val_str.split(",") if part.strip()]
    else:
      try:
        if "." in val_str or "e" in val_str:
          final_val = float(val_str)
        else:
          final_val = int(val_str)
      except ValueError:
        pass

    config[key] = final_val

  return config
