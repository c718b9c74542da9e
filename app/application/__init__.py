"""
Application layer package.

One use case per module, each a single class with an ``execute``
method. Use cases depend on domain ports, never on infrastructure.
"""
