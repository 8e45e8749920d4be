"""Infrastructure Layer — database sessions, password hashing, logging setup.

Invariants:
    - Store failures are mapped to StoreUnavailableError before leaving this layer

Design Decisions:
    - Thin wrappers over third-party clients, constructed once in the app lifespan
"""
