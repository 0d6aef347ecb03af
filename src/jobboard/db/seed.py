"""Populate a store with the static catalogue, the demo jobs and an admin user."""

import logging
import uuid
from typing import Dict, Optional

from ..models.catalog import INDUSTRIES, LOCATIONS, SEED_JOBS
from ..models.job_models import Job
from .adapters import job_to_row
from .repository import DuplicateRecordError, JobBoardDatabase

logger = logging.getLogger(__name__)


async def seed(
    db: JobBoardDatabase,
    admin_email: Optional[str] = None,
    admin_password: Optional[str] = None,
) -> Dict[str, int]:
    """Insert the catalogue into ``db`` and return how many rows were new.

    Existing rows are left alone, so seeding twice is safe. The admin user is
    created only when both credentials are given.
    """
    counts = {"industries": 0, "locations": 0, "jobs": 0, "admin_users": 0}

    for industry in INDUSTRIES:
        counts["industries"] += await db.insert_or_ignore("industries", industry.model_dump())
    for location in LOCATIONS:
        counts["locations"] += await db.insert_or_ignore("locations", location.model_dump())

    for seed_job in SEED_JOBS:
        job = Job(id=str(uuid.uuid4()), **seed_job)
        counts["jobs"] += await db.insert_or_ignore("jobs", job_to_row(job))

    if admin_email and admin_password:
        try:
            await db.create_admin_user(admin_email, admin_password)
            counts["admin_users"] += 1
        except DuplicateRecordError:
            logger.info(f"Admin user {admin_email} already exists")
    else:
        logger.warning("No admin credentials given; no admin user created")

    return counts
