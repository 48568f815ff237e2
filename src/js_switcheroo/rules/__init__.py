"""
Rules Package.

Automatically discovers and registers every rule module within this package, so
adding a file (e.g. ``no_foo.py``) registers its rules without edits here.
"""

import importlib
import logging
import pkgutil
from pathlib import Path

logger = logging.getLogger(__name__)

_pkg_dir = Path(__file__).parent

for _, module_name, _ in pkgutil.iter_modules([str(_pkg_dir)]):
  if module_name.startswith("_"):
    continue

  try:
    importlib.import_module(f".{module_name}", package=__name__)
  except ImportError as e:
    logger.warning(f"Failed to auto-load rule module '{module_name}': {e}")
