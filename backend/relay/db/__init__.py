"""Database Infrastructure — async session factory, SQLAlchemy Base, seed script.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests and local runs
"""
