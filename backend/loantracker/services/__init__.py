"""Services Layer — credential store, payment repository, auth and ownership guard.

Invariants:
    - Services receive their AsyncSession / collaborators by constructor injection
    - Pure rules (validation, ownership, status) live in core/; services only orchestrate IO
"""
