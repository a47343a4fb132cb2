"""SQLAlchemy Declarative Base — shared base class and metadata for all ORM models.

Invariants:
    - All models inherit from Base
    - Base.metadata is the single source of truth for table metadata (alembic reads it)
    - Constraint names follow NAMING_CONVENTION, so migrations can drop them by name
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all Relay ORM models."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
