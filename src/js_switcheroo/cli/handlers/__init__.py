from .fix import handle_fix
from .lint import handle_lint
from .rules import handle_rules

__all__ = [
  "handle_fix",
  "handle_lint",
  "handle_rules",
]
