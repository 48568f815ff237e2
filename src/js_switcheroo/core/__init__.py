"""
Core Package.

Contains the migration machinery:
- Node model and tree-sitter parser adapter
- Shape matchers and rewrite synthesizer
- Diagnostics, fixer and engine
- Rule registry
"""
