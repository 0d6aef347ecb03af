"""Tests for the admin CRUD controller."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from jobboard.db.adapters import job_to_row
from jobboard.db.repository import DatabaseError
from jobboard.errors import AuthError, PersistenceError, ValidationError
from jobboard.models.job_models import JobEditForm, JobStatus
from jobboard.services.admin import AdminController
from jobboard.services.listing import JobListingController


@pytest_asyncio.fixture
async def session(db):
    await db.create_admin_user("admin@example.com", "s3cret")
    return await db.sign_in("admin@example.com", "s3cret")


@pytest_asyncio.fixture
async def admin(db, session):
    return await AdminController.open(db, session.token)


def _job_form(**overrides) -> JobEditForm:
    values = dict(
        position="QA Engineer",
        job_code="Q2001",
        location="Kochi, Kerala",
        experience="3-5 years",
        industry="Technology",
        description="Own the release test plan.",
        key_skills="Selenium\nPytest\nCI",
        responsibilities="Write tests\nReview releases",
        department="Quality",
        salary_range="10-15 LPA",
        status=True,
    )
    values.update(overrides)
    return JobEditForm(**values)


async def _store_application(db, job_id):
    return await db.insert(
        "applications",
        {
            "job_id": job_id,
            "fullname": "Asha Rao",
            "email": "asha@example.com",
            "phone": "1",
            "yearsofexperience": "6",
            "currentcompany": "Acme",
            "currentdesignation": "Engineer",
            "currentctc": "1",
            "currenttakehome": "1",
            "expectedctc": "2",
            "noticeperiod": "30",
            "location": "Pune",
            "department": "Operations",
            "resume_url": "http://testserver/uploads/a.pdf",
        },
    )


@pytest.mark.asyncio
async def test_open_requires_a_live_session(db):
    with pytest.raises(AuthError):
        await AdminController.open(db, None)
    with pytest.raises(AuthError):
        await AdminController.open(db, "forged-token")


@pytest.mark.asyncio
async def test_revoked_session_blocks_operations(db, admin, published_job):
    await db.sign_out(admin.session.token)
    with pytest.raises(AuthError):
        await admin.toggle_status(published_job.id)
    assert (await db.get("jobs", published_job.id))["status"] == "Published"
    assert admin.notifier.last.title == "Not authenticated"


@pytest.mark.asyncio
async def test_list_jobs_groups_applications(db, admin, published_job, make_job):
    other = make_job(job_code="J2002", status=JobStatus.DRAFT)
    await db.insert("jobs", job_to_row(other))
    application = await _store_application(db, published_job.id)

    jobs = await admin.list_jobs()

    assert {job.job_code for job in jobs} == {"J1001", "J2002"}
    assert [a.id for a in admin.applications[published_job.id]] == [application["id"]]
    assert admin.applications[other.id] == []


@pytest.mark.asyncio
async def test_create_job_adds_lookups_and_owner(db, admin, session):
    await db.insert("industries", {"id": "tech", "name": "Technology"})

    job = await admin.save_job(_job_form())

    assert job.status == JobStatus.PUBLISHED
    assert job.user_id == session.user_id
    assert job.key_skills == ["Selenium", "Pytest", "CI"]
    assert job.experience.id == "mid"
    assert job.industry.id == "tech"
    assert admin.jobs[0].id == job.id
    assert [r["city"] for r in await db.query("locations")] == ["Kochi"]
    assert len(await db.query("industries")) == 1


@pytest.mark.asyncio
async def test_new_industry_whose_slug_is_taken_gets_its_own_row(db, admin):
    await db.insert("industries", {"id": "tech", "name": "Technology"})
    await db.insert("locations", {"id": "kochi-kerala", "city": "Kochi Kerala", "state": ""})

    job = await admin.save_job(_job_form(industry="Tech", location="Kochi, Kerala"))

    industries = {r["name"]: r["id"] for r in await db.query("industries")}
    assert set(industries) == {"Technology", "Tech"}
    assert job.industry.id == industries["Tech"] != "tech"

    location_rows = await db.query("locations", {"city": "Kochi", "state": "Kerala"})
    assert [r["id"] for r in location_rows] == [job.location.id]

    listing = JobListingController(db)
    await listing.load_lookups()
    await listing.load()
    listing.update_criteria(industry_id=job.industry.id)
    assert [j.job_code for j in listing.visible_jobs] == ["Q2001"]


@pytest.mark.asyncio
async def test_store_failure_during_session_check_is_reported(db, admin, published_job):
    await admin.list_jobs()
    admin.store.get_session = AsyncMock(side_effect=DatabaseError("disk I/O error"))

    with pytest.raises(PersistenceError) as exc_info:
        await admin.toggle_status(published_job.id)

    assert exc_info.value.title == "System Error"
    assert admin.notifier.last.title == "System Error"
    assert admin.jobs[0].status == JobStatus.PUBLISHED


@pytest.mark.asyncio
async def test_update_keeps_posting_date_and_owner(db, admin, published_job):
    await admin.list_jobs()

    updated = await admin.save_job(
        _job_form(job_code="J1001", position="Lead Engineer", status=False), job_id=published_job.id
    )

    assert updated.title == "Lead Engineer"
    assert updated.status == JobStatus.DRAFT
    assert updated.date_posted == published_job.date_posted
    assert updated.user_id == published_job.user_id
    assert len(await db.query("jobs")) == 1


@pytest.mark.asyncio
async def test_duplicate_job_code_is_reported(db, admin, published_job):
    with pytest.raises(PersistenceError):
        await admin.save_job(_job_form(job_code="J1001"))
    assert admin.jobs == []
    assert admin.notifier.last.is_error


@pytest.mark.asyncio
async def test_invalid_form_dict_is_rejected(admin):
    with pytest.raises(ValidationError) as exc_info:
        await admin.save_job({"position": "Q", "job_code": "Q1"})
    assert "position" in exc_info.value.description


@pytest.mark.asyncio
async def test_toggle_status_twice_restores(db, admin, published_job):
    await admin.list_jobs()

    first = await admin.toggle_status(published_job.id)
    assert first.status == JobStatus.DRAFT
    assert (await db.get("jobs", published_job.id))["status"] == "Draft"
    assert admin.jobs[0].status == JobStatus.DRAFT
    assert admin.notifier.last.description == "Job moved to draft successfully"

    second = await admin.toggle_status(published_job.id)
    assert second.status == JobStatus.PUBLISHED
    assert admin.notifier.last.description == "Job published successfully"
    assert (await db.get("jobs", published_job.id))["status"] == "Published"
    assert admin.jobs[0].status == JobStatus.PUBLISHED


@pytest.mark.asyncio
async def test_failed_toggle_leaves_local_state(db, admin, published_job):
    await admin.list_jobs()
    admin.store.update = AsyncMock(side_effect=DatabaseError("locked"))

    with pytest.raises(PersistenceError):
        await admin.toggle_status(published_job.id)

    assert admin.jobs[0].status == JobStatus.PUBLISHED
    assert admin.last_error.description == "Failed to update job status"
    assert admin.notifier.last.description == "Failed to update job status"


@pytest.mark.asyncio
async def test_delete_job(db, admin, published_job):
    await admin.list_jobs()
    await admin.delete_job(published_job.id)
    assert admin.jobs == []
    assert await db.get("jobs", published_job.id) is None

    with pytest.raises(PersistenceError):
        await admin.delete_job(published_job.id)


@pytest.mark.asyncio
async def test_failed_delete_keeps_job(db, admin, published_job):
    await admin.list_jobs()
    admin.store.delete = AsyncMock(side_effect=DatabaseError("locked"))
    with pytest.raises(PersistenceError):
        await admin.delete_job(published_job.id)
    assert [job.id for job in admin.jobs] == [published_job.id]


@pytest.mark.asyncio
async def test_toggle_processed(db, admin, published_job):
    application = await _store_application(db, published_job.id)
    await admin.list_jobs()

    updated = await admin.toggle_processed(application["id"])

    assert updated.processed is True
    assert (await db.get("applications", application["id"]))["processed"] is True
    assert admin.applications[published_job.id][0].processed is True

    with pytest.raises(PersistenceError):
        await admin.toggle_processed("missing")
