"""Admin CRUD controller for job postings and the applications they receive.

Every operation re-checks the session against the store, confirms the change
with the backend first and only then updates the controller's local view.
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..db.adapters import (
    experience_from_value,
    industry_from_value,
    job_from_row,
    job_to_row,
    location_from_value,
    salary_from_value,
)
from ..db.repository import (
    DatabaseError,
    DuplicateRecordError,
    JobBoardDatabase,
    RecordNotFoundError,
)
from ..errors import AuthError, JobBoardError, PersistenceError, ValidationError
from ..models.application_models import Application, Session
from ..models.job_models import Industry, Job, JobEditForm, JobStatus, Location
from .notices import Notifier

logger = logging.getLogger(__name__)

NOT_SIGNED_IN = "Please sign in to access the admin dashboard."


async def require_session(store: JobBoardDatabase, token: Optional[str]) -> Session:
    """Return the live session for ``token`` or raise AuthError."""
    try:
        session = await store.get_session(token)
    except DatabaseError as e:
        logger.error(f"Error checking admin session: {e}")
        raise PersistenceError(
            "Could not verify your session. Please try again.", title="System Error"
        )
    if session is None:
        raise AuthError(NOT_SIGNED_IN)
    return session


class AdminController:
    """Job and application management for an authenticated admin."""

    def __init__(
        self,
        store: JobBoardDatabase,
        session: Session,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.session = session
        self.notifier = notifier or Notifier()
        self.jobs: List[Job] = []
        self.applications: Dict[str, List[Application]] = {}
        self.last_error: Optional[JobBoardError] = None

    @classmethod
    async def open(
        cls, store: JobBoardDatabase, token: Optional[str], notifier: Optional[Notifier] = None
    ) -> "AdminController":
        return cls(store, await require_session(store, token), notifier)

    async def _check_session(self) -> None:
        try:
            self.session = await require_session(self.store, self.session.token)
        except JobBoardError as e:
            self._fail(e)

    def _fail(self, exc: JobBoardError) -> None:
        self.last_error = exc
        self.notifier.error(exc)
        raise exc

    def _find_job(self, job_id: str) -> Optional[Job]:
        return next((job for job in self.jobs if job.id == job_id), None)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_jobs(self) -> List[Job]:
        """Load every job, newest first, with its applications grouped by job."""
        await self._check_session()
        try:
            rows = await self.store.query("jobs", order_by="dateposted", descending=True)
            jobs = [job_from_row(row) for row in rows]
            application_rows = await self.store.query(
                "applications",
                order_by="created_at",
                descending=True,
                in_filters={"job_id": [job.id for job in jobs]},
            )
        except (DatabaseError, ValueError) as e:
            logger.error(f"Error fetching jobs: {e}")
            self._fail(PersistenceError("Failed to fetch jobs", title="Error"))

        grouped: Dict[str, List[Application]] = {job.id: [] for job in jobs}
        for row in application_rows:
            grouped.setdefault(row["job_id"], []).append(Application.model_validate(row))

        self.jobs = jobs
        self.applications = grouped
        logger.info(f"Admin loaded {len(jobs)} jobs and {len(application_rows)} applications")
        return list(self.jobs)

    # ------------------------------------------------------------------
    # Job mutations
    # ------------------------------------------------------------------

    async def _free_lookup_id(self, table: str, base: str) -> str:
        """``base`` if no lookup row holds it yet, otherwise a suffixed variant."""
        if base and await self.store.get(table, base) is None:
            return base
        return f"{base}-{uuid.uuid4().hex[:8]}" if base else uuid.uuid4().hex

    async def _resolve_industry(self, name: str) -> Industry:
        rows = await self.store.query("industries", {"name": name}, limit=1)
        if not rows:
            industry = industry_from_value(name)
            industry_id = await self._free_lookup_id("industries", industry.id)
            await self.store.insert_or_ignore("industries", {"id": industry_id, "name": name})
            rows = await self.store.query("industries", {"name": name}, limit=1)
            if not rows:
                raise DatabaseError(f"Industry {name!r} was not stored")
        return Industry(id=rows[0]["id"], name=rows[0]["name"])

    async def _resolve_location(self, label: str) -> Location:
        location = location_from_value(label)
        match = {"city": location.city, "state": location.state}
        rows = await self.store.query("locations", match, limit=1)
        if not rows:
            location_id = await self._free_lookup_id("locations", location.id)
            await self.store.insert_or_ignore("locations", {"id": location_id, **match})
            rows = await self.store.query("locations", match, limit=1)
            if not rows:
                raise DatabaseError(f"Location {label!r} was not stored")
        return Location(id=rows[0]["id"], city=rows[0]["city"], state=rows[0]["state"])

    async def save_job(
        self, form: Union[JobEditForm, dict], job_id: Optional[str] = None
    ) -> Job:
        """Create a job, or update ``job_id`` keeping its posting date and owner."""
        await self._check_session()
        if not isinstance(form, JobEditForm):
            try:
                form = JobEditForm.model_validate(form)
            except PydanticValidationError as e:
                fields = ", ".join(str(err["loc"][-1]) for err in e.errors())
                self._fail(ValidationError(f"Please check the following fields: {fields}"))

        existing = None
        if job_id is not None:
            existing = self._find_job(job_id)
            if existing is None:
                row = await self.store.get("jobs", job_id)
                existing = job_from_row(row) if row else None
            if existing is None:
                self._fail(PersistenceError("Job not found", title="Error"))

        action = "update" if existing else "create"
        try:
            industry = await self._resolve_industry(form.industry.strip())
            location = await self._resolve_location(form.location)
            job = Job(
                id=existing.id if existing else str(uuid.uuid4()),
                job_code=form.job_code.strip(),
                title=form.position.strip(),
                location=location,
                experience=experience_from_value(form.experience),
                industry=industry,
                department=form.department,
                key_skills=form.skills_list(),
                description=form.description,
                responsibilities=form.responsibilities_list(),
                salary_range=salary_from_value(form.salary_range),
                ctc=form.ctc or None,
                gender=form.gender or None,
                status="Published" if form.status else "Draft",
                date_posted=existing.date_posted if existing else datetime.utcnow(),
                user_id=existing.user_id if existing else self.session.user_id,
            )
            row = job_to_row(job)
            if existing:
                # Posting date and owner never change on edit
                for column in ("dateposted", "user_id"):
                    row.pop(column)
            stored = await self.store.upsert("jobs", row)
        except DuplicateRecordError:
            self._fail(PersistenceError(f"A job with ID {form.job_code} already exists", title="Error"))
        except DatabaseError as e:
            logger.error(f"Error trying to {action} job: {e}")
            self._fail(PersistenceError(f"Failed to {action} job", title="Error"))

        saved = job_from_row(stored)
        if existing:
            self.jobs = [saved if j.id == saved.id else j for j in self.jobs]
        else:
            self.jobs = [saved] + self.jobs
            self.applications.setdefault(saved.id, [])
        self.notifier.notify("Success", f"Job {action}d successfully")
        logger.info(f"Job {saved.job_code} {action}d by {self.session.email}")
        return saved

    async def toggle_status(self, job_id: str) -> Job:
        """Flip Published <-> Draft with a single-field update."""
        await self._check_session()
        current = self._find_job(job_id)
        if current is None:
            row = await self.store.get("jobs", job_id)
            if row is None:
                self._fail(PersistenceError("Job not found", title="Error"))
            current = job_from_row(row)

        new_status = current.status.toggled()
        try:
            await self.store.update("jobs", job_id, {"status": new_status.value})
        except DatabaseError as e:
            logger.error(f"Error updating job status: {e}")
            self._fail(PersistenceError("Failed to update job status", title="Error"))

        updated = current.model_copy(update={"status": new_status})
        self.jobs = [updated if j.id == job_id else j for j in self.jobs]
        verb = "published" if new_status == JobStatus.PUBLISHED else "moved to draft"
        self.notifier.notify("Success", f"Job {verb} successfully")
        return updated

    async def delete_job(self, job_id: str) -> None:
        await self._check_session()
        try:
            await self.store.delete("jobs", job_id)
        except RecordNotFoundError:
            self._fail(PersistenceError("Job not found", title="Error"))
        except DatabaseError as e:
            logger.error(f"Error deleting job: {e}")
            self._fail(PersistenceError("Failed to delete job", title="Error"))

        self.jobs = [job for job in self.jobs if job.id != job_id]
        self.applications.pop(job_id, None)
        self.notifier.notify("Success", "Job deleted successfully")

    # ------------------------------------------------------------------
    # Application mutations
    # ------------------------------------------------------------------

    def _find_application(self, application_id: str) -> Optional[Application]:
        for applications in self.applications.values():
            for application in applications:
                if application.id == application_id:
                    return application
        return None

    async def toggle_processed(self, application_id: str) -> Application:
        """Flip the processed flag of one application."""
        await self._check_session()
        current = self._find_application(application_id)
        try:
            if current is None:
                row = await self.store.get("applications", application_id)
                if row is None:
                    raise RecordNotFoundError(f"No application {application_id}")
                current = Application.model_validate(row)
            await self.store.update(
                "applications", application_id, {"processed": not current.processed}
            )
        except RecordNotFoundError:
            self._fail(PersistenceError("Application not found", title="Error"))
        except DatabaseError as e:
            logger.error(f"Error updating application status: {e}")
            self._fail(PersistenceError("Failed to update application status", title="Error"))

        updated = current.model_copy(update={"processed": not current.processed})
        if updated.job_id in self.applications:
            self.applications[updated.job_id] = [
                updated if a.id == application_id else a
                for a in self.applications[updated.job_id]
            ]
        self.notifier.notify(
            "Success",
            f"Application marked as {'processed' if updated.processed else 'unprocessed'}",
        )
        return updated
