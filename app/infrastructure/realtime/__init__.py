"""
Realtime change feed adapter.
"""
