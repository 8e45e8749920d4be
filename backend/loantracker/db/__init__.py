"""Database Package — SQLAlchemy declarative Base.

Invariants:
    - All sessions are async (AsyncSession), managed by infrastructure/database.py

Design Decisions:
    - asyncpg driver for PostgreSQL (native async, no thread pool overhead)
"""
