"""
Subscription Manager: subscription records and spend aggregation API.

Application package root. A small modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - subscriptions: Subscription lifecycle and spend aggregation over month windows.

Layers:
    - domain: Entities, filters, month arithmetic, ports (ABCs), errors.
    - application: SubscriptionService orchestration.
    - infrastructure: Repository adapters (SQL, in-memory), engine, migrations.
    - interfaces: FastAPI routers, Pydantic schemas, dependency wiring.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
