"""Directory API Package — accounts, sessions and public profile directory.

Invariants:
    - Package root holds metadata only (no imports, no side effects)
"""

__version__ = "1.0.0"
