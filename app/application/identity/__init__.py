"""
Identity application layer.

Use cases for accounts and sessions.
"""
