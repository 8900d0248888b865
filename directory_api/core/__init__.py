"""Core — pure domain logic: types, errors, credentials, tokens, mapping.

Invariants:
    - No database sessions, no network IO in this package
"""
