"""Seed Script — clears the profiles table and inserts demo profiles.

Usage:
    python -m relay.db.seed            # uses DATABASE_URL / .env

Invariants:
    - Development only: deletes every existing profile first
    - Inserts SEED_PROFILES with fixed ids, so re-running yields the same rows
"""

import asyncio
import logging
import sys
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine

from relay.config import get_settings
from relay.db.session import create_session_factory
from relay.infrastructure.observability import setup_logging
from relay.models.profile import Profile

logger = logging.getLogger(__name__)

SEED_PROFILES = [
    {
        "id": UUID("00000000-0000-4000-8000-000000000001"),
        "nickname": "Alice Johnson",
        "email": "alice@example.com",
        "bio": "Frontend engineer, into React and TypeScript",
    },
    {
        "id": UUID("00000000-0000-4000-8000-000000000002"),
        "nickname": "Bob Smith",
        "email": "bob@example.com",
        "bio": "Full-stack developer focused on Node.js and database design",
    },
    {
        "id": UUID("00000000-0000-4000-8000-000000000003"),
        "nickname": "Charlie Brown",
        "email": "charlie@example.com",
        "bio": "UI/UX designer who cares about user experience",
    },
    {
        "id": UUID("00000000-0000-4000-8000-000000000004"),
        "nickname": "Zhang San",
        "email": "zhangsan@example.com",
        "bio": "Backend engineer, microservice architecture",
    },
    {
        "id": UUID("00000000-0000-4000-8000-000000000005"),
        "nickname": "Li Si",
        "email": "lisi@example.com",
        "bio": "DevOps engineer working on cloud-native tooling",
    },
]


async def seed(database_url: str) -> int:
    """Replace all profiles with SEED_PROFILES. Returns rows inserted."""
    engine = create_async_engine(database_url)
    factory = create_session_factory(engine=engine)
    try:
        async with factory() as db:
            logger.info("Clearing existing profiles")
            await db.execute(delete(Profile))
            db.add_all(Profile(**row) for row in SEED_PROFILES)
            await db.commit()
    finally:
        await engine.dispose()
    for row in SEED_PROFILES:
        logger.info(f"Seeded {row['nickname']} ({row['email']})")
    return len(SEED_PROFILES)


def main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    try:
        count = asyncio.run(seed(settings.database_url))
    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        return 1
    logger.info(f"Inserted {count} profiles")
    return 0


if __name__ == "__main__":
    sys.exit(main())
