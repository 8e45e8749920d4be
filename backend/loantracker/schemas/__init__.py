"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape and JSON types at the system boundary
    - Domain rules (positive amount, real calendar date) are re-checked in core/

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - camelCase on the wire, snake_case in Python (alias generator)
"""
