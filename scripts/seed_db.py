"""Seed the job board database with lookups, demo jobs and an admin user.

Usage:
    python scripts/seed_db.py

The admin user is created only when ADMIN_EMAIL and ADMIN_PASSWORD are set.
"""

import asyncio

from dotenv import load_dotenv

from jobboard.config import settings
from jobboard.db.repository import JobBoardDatabase
from jobboard.db.seed import seed
from jobboard.logging_config import log_structured, setup_logging

load_dotenv()

logger = setup_logging("jobboard")


async def main():
    db = await JobBoardDatabase(settings.database_path).ainit()
    try:
        counts = await seed(db, settings.admin_email, settings.admin_password)
        log_structured(logger, "info", "Seeding complete", counts)
        print(f"Seeded {settings.database_path}: {counts}")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
