"""Test configuration and fixtures."""

import os
import tempfile
import uuid
from datetime import datetime

# Test configuration; set before any jobboard module reads its settings
TEST_ROOT = tempfile.mkdtemp(prefix="jobboard-tests-")
os.environ["DATABASE_PATH"] = os.path.join(TEST_ROOT, "jobboard.db")
os.environ["UPLOAD_DIR"] = os.path.join(TEST_ROOT, "uploads")
os.environ["LOG_DIR"] = os.path.join(TEST_ROOT, "logs")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["WEBHOOK_URL"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from jobboard.db.adapters import job_to_row  # noqa: E402
from jobboard.db.repository import JobBoardDatabase  # noqa: E402
from jobboard.models.application_models import ApplicationForm, ResumeFile  # noqa: E402
from jobboard.models.catalog import (  # noqa: E402
    EXPERIENCE_RANGES,
    INDUSTRIES,
    LOCATIONS,
    SALARY_RANGES,
)
from jobboard.models.job_models import Job, JobStatus  # noqa: E402

PDF_TYPE = "application/pdf"


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory store with the schema applied."""
    database = await JobBoardDatabase(":memory:").ainit()
    yield database
    await database.close()


@pytest.fixture
def make_job():
    """Factory for canonical jobs; keyword arguments override the defaults."""

    def _make(**overrides) -> Job:
        values = dict(
            id=str(uuid.uuid4()),
            job_code="J1001",
            title="Senior Software Engineer",
            location=LOCATIONS[1],
            experience=EXPERIENCE_RANGES[3],
            industry=INDUSTRIES[0],
            department="Engineering",
            key_skills=["React", "Node.js", "TypeScript"],
            description="Build and run our web platform.",
            salary_range=SALARY_RANGES[3],
            status=JobStatus.PUBLISHED,
            date_posted=datetime(2025, 5, 10),
        )
        values.update(overrides)
        return Job(**values)

    return _make


@pytest_asyncio.fixture
async def published_job(db, make_job):
    """A published job stored in ``db``."""
    job = make_job()
    await db.insert("jobs", job_to_row(job))
    return job


@pytest.fixture
def complete_form() -> ApplicationForm:
    return ApplicationForm(
        full_name="Asha Rao",
        email="asha@example.com",
        phone="+91 98450 00000",
        years_of_experience="6",
        current_company="Acme Corp",
        current_designation="Engineer",
        current_ctc="1800000",
        current_take_home="110000",
        expected_ctc="2400000",
        notice_period="30",
        location="Bangalore",
        department="Information Technology",
    )


@pytest.fixture
def pdf_resume() -> ResumeFile:
    return ResumeFile(filename="asha.pdf", content_type=PDF_TYPE, content=b"%PDF-1.4 resume")
