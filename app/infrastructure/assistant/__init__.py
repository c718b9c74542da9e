"""
Infrastructure adapters for the support assistant.
"""
