"""
Profitshare: managed forex/gold accounts with a 50/50 profit split.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - settlement: Applications, client lifecycle, broker logins,
      payment proofs, payment settings.
    - identity: Accounts, sessions, operator role.
    - assistant: Streaming support chat.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (DB, blob store, HTTP) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
