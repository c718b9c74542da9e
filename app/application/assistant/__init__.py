"""
Assistant application layer.
"""
