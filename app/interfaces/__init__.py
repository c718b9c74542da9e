"""
Interfaces layer package.

FastAPI routers, Pydantic request/response schemas and dependency
wiring for the client app, the operator console, the assistant and
the realtime feed. Routes call use cases and return responses.
"""
