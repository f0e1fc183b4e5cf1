"""Command-line adapter package.

Scope:
- Flag parsing, user-facing output and exit codes only.
- No request/response logic is implemented here.
"""
