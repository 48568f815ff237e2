"""
Static Analysis Package.

Modules:
    - ``bindings``: Per-unit alias table for tracked global symbols.
"""
