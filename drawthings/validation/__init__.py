"""Request validation package.

Scope:
    Fail-fast range checks applied before any network call is made.
"""
