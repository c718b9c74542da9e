"""
Infrastructure layer package.

Concrete adapters for the ports defined in the domain layer: the SQL
record store, identity sessions, the blob store, the operator webhook,
the assistant endpoint and the realtime change stream.
"""
