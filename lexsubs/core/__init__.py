"""
lexsubs.core: shared helpers used across the override engine.

Modules:
  - names: name qualification against the compiling namespace
  - diagnostics: reported-condition records and their codes
"""

__all__ = [
    "names",
    "diagnostics",
]
