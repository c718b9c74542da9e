"""
Domain layer package.

Pure business logic: entities, value objects, ports and errors.
No framework or IO imports allowed in this layer.
"""
