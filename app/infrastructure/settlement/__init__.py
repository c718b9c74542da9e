"""
Infrastructure adapters for the settlement bounded context.

Each adapter implements a domain port (ABC) and connects
to external systems: the database, blob storage, the operator webhook.
"""
