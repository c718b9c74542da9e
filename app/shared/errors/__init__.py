"""
Shared error handling package.

Maps every context's domain errors onto one JSON error envelope.
"""
