"""ORM Models — SQLAlchemy declarative models owned by the data-access layer.

Invariants:
    - All models inherit from Base (db/base.py)
    - The procedure core never imports this package; it sees profiles as dicts

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all/alembic
"""

from relay.models.profile import Profile  # noqa: F401
