#!/usr/bin/env python3
"""
Job Board API

This FastAPI service exposes the public job board, application submission,
resume uploads and the admin job management endpoints.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from ..config import settings
from ..db.adapters import job_from_row
from ..db.repository import DatabaseError, InvalidCredentialsError, JobBoardDatabase
from ..errors import (
    AuthError,
    InvalidReferenceError,
    JobBoardError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from ..logging_config import log_structured, setup_logging
from ..models.application_models import ApplicationForm, ResumeFile
from ..models.catalog import DEPARTMENTS, EXPERIENCE_RANGES, GENDER_PREFERENCES, SALARY_RANGES
from ..models.job_models import JobEditForm, JobStatus
from ..services.admin import AdminController
from ..services.listing import JobListingController, ListingState
from ..services.submission import ResumeUploadClient, SubmissionWorkflow, WebhookNotifier
from ..services.upload import router as upload_router

# Load environment variables
load_dotenv()

# Create module-specific logger
logger = setup_logging("jobboard")

ERROR_STATUS = (
    (ValidationError, 422),
    (UploadError, 502),
    (InvalidReferenceError, 404),
    (PersistenceError, 500),
    (AuthError, 401),
)

bearer = HTTPBearer(auto_error=False)

MAX_PAGES = 1000


def status_for(exc: JobBoardError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and the outbound clients for the app's lifetime."""
    logger.info("Starting service")
    db = await JobBoardDatabase(settings.database_path).ainit()
    app.state.db = db
    app.state.uploader = ResumeUploadClient()
    app.state.webhook = WebhookNotifier()
    try:
        yield
    finally:
        logger.info("Starting graceful shutdown")
        await app.state.webhook.drain()
        await db.close()
        logger.info("Service shutdown complete")


app = FastAPI(
    title="Job Board Service",
    description="Public job listings, applications and admin job management",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(upload_router)

os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.exception_handler(JobBoardError)
async def job_board_error_handler(request: Request, exc: JobBoardError) -> JSONResponse:
    status_code = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"title": exc.title, "description": exc.description}},
        headers=headers,
    )


# ----------------------------------------------------------------------
# Dependencies
# ----------------------------------------------------------------------


def get_db(request: Request) -> JobBoardDatabase:
    return request.app.state.db


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_admin(
    token: Optional[str] = Depends(bearer_token),
    db: JobBoardDatabase = Depends(get_db),
) -> AdminController:
    return await AdminController.open(db, token)


def application_form(
    full_name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    years_of_experience: str = Form(""),
    current_company: str = Form(""),
    current_designation: str = Form(""),
    current_ctc: str = Form(""),
    current_take_home: str = Form(""),
    expected_ctc: str = Form(""),
    notice_period: str = Form(""),
    location: str = Form(""),
    department: str = Form(""),
    other_department: str = Form(""),
) -> ApplicationForm:
    return ApplicationForm(
        full_name=full_name,
        email=email,
        phone=phone,
        years_of_experience=years_of_experience,
        current_company=current_company,
        current_designation=current_designation,
        current_ctc=current_ctc,
        current_take_home=current_take_home,
        expected_ctc=expected_ctc,
        notice_period=notice_period,
        location=location,
        department=department,
        other_department=other_department,
    )


class LoginRequest(BaseModel):
    email: str
    password: str


# ----------------------------------------------------------------------
# Public endpoints
# ----------------------------------------------------------------------


@app.get("/health")
async def health_check(db: JobBoardDatabase = Depends(get_db)) -> Dict[str, Any]:
    """Health check endpoint."""
    if not await db.check_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")
    return {
        "status": "healthy",
        "database": "connected",
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/lookups")
async def get_lookups(db: JobBoardDatabase = Depends(get_db)) -> Dict[str, Any]:
    """Filter options: stored industries and locations plus the static ranges."""
    try:
        industries = await db.query("industries", order_by="name")
        locations = await db.query("locations", order_by="city")
    except DatabaseError as e:
        logger.error(f"Error fetching lookups: {e}")
        raise PersistenceError("Could not load industries and locations.", title="Error loading filters")
    return {
        "industries": [{"id": r["id"], "name": r["name"]} for r in industries],
        "locations": [{"id": r["id"], "city": r["city"], "state": r["state"]} for r in locations],
        "experience_ranges": [e.model_dump() for e in EXPERIENCE_RANGES],
        "salary_ranges": [s.model_dump() for s in SALARY_RANGES],
        "departments": DEPARTMENTS,
        "genders": GENDER_PREFERENCES,
    }


@app.get("/jobs")
async def list_jobs(
    industry: Optional[str] = None,
    location: Optional[str] = None,
    experience: Optional[str] = None,
    salary: Optional[str] = None,
    gender: Optional[str] = None,
    q: str = "",
    pages: int = Query(1, ge=1, le=MAX_PAGES),
    db: JobBoardDatabase = Depends(get_db),
) -> Dict[str, Any]:
    """Published jobs, filtered, showing ``pages`` increments of the page size."""
    listing = JobListingController(db)
    await listing.load_lookups()
    await listing.load()
    if listing.state == ListingState.LOAD_ERROR:
        notice = listing.notifier.last
        raise PersistenceError(notice.description, title=notice.title)

    listing.update_criteria(
        industry_id=industry,
        location_id=location,
        experience_id=experience,
        salary_id=salary,
        gender=gender,
        search=q,
    )
    listing.show_pages(pages)

    return {
        "total": listing.total_count,
        "showing": listing.showing_count,
        "has_more": listing.has_more,
        "page_size": listing.page_size,
        "active_filters": listing.active_filters,
        "jobs": [job.model_dump(mode="json") for job in listing.visible_jobs],
    }


@app.get("/jobs/{job_code}")
async def get_job(job_code: str, db: JobBoardDatabase = Depends(get_db)) -> Dict[str, Any]:
    try:
        rows = await db.query(
            "jobs", {"job_code": job_code, "status": JobStatus.PUBLISHED.value}, limit=1
        )
    except DatabaseError as e:
        logger.error(f"Error fetching job {job_code}: {e}")
        raise PersistenceError("Could not load the job. Please try again.", title="System Error")
    if not rows:
        raise InvalidReferenceError("The job ID provided is not valid or could not be found.")
    return job_from_row(rows[0]).model_dump(mode="json")


@app.post("/applications", status_code=201)
async def submit_application(
    request: Request,
    form: ApplicationForm = Depends(application_form),
    resume: Optional[UploadFile] = File(None),
    job_code: Optional[str] = Form(None),
    page_url: str = Form(""),
    db: JobBoardDatabase = Depends(get_db),
) -> Dict[str, Any]:
    """Submit an application for ``job_code``, or a general profile for the generic id."""
    job = None
    if job_code and job_code != settings.generic_job_id:
        try:
            rows = await db.query("jobs", {"job_code": job_code}, limit=1)
            job = job_from_row(rows[0]) if rows else None
        except (DatabaseError, ValueError) as e:
            logger.error(f"Error resolving job {job_code}: {e}")
            raise PersistenceError(
                "Could not verify the job. Please try again.", title="System Error"
            )

    workflow = SubmissionWorkflow(
        db,
        uploader=request.app.state.uploader,
        webhook=request.app.state.webhook,
        job=job,
        job_code=job_code,
        page_url=page_url,
    )
    workflow.form_state.update(**form.model_dump())
    if resume is not None and resume.filename:
        selected = workflow.form_state.select_resume(
            ResumeFile(
                filename=resume.filename,
                content_type=resume.content_type or "",
                content=await resume.read(),
            )
        )
        if not selected:
            raise ValidationError(workflow.form_state.file_error, title="Invalid File")

    state = await workflow.submit()
    if state.error is not None:
        raise state.error

    log_structured(
        logger,
        "info",
        "Submission stored",
        {"record_id": workflow.record_id, "job_code": job_code, "generic": workflow.is_generic},
    )
    notice = workflow.notifier.last
    return {
        "title": notice.title,
        "description": notice.description,
        "record_id": workflow.record_id,
        "resume_url": state.resume_url,
        "generic": workflow.is_generic,
    }


# ----------------------------------------------------------------------
# Admin endpoints
# ----------------------------------------------------------------------


@app.post("/admin/login")
async def admin_login(body: LoginRequest, db: JobBoardDatabase = Depends(get_db)) -> Dict[str, Any]:
    try:
        session = await db.sign_in(body.email, body.password)
    except InvalidCredentialsError:
        logger.warning("Failed admin sign-in attempt")
        raise AuthError("Invalid email or password", title="Login failed")
    logger.info(f"Admin signed in: {session.email}")
    return {
        "access_token": session.token,
        "token_type": "bearer",
        "expires_at": session.expires_at.isoformat(),
    }


@app.post("/admin/logout")
async def admin_logout(
    token: Optional[str] = Depends(bearer_token),
    db: JobBoardDatabase = Depends(get_db),
) -> Dict[str, str]:
    if token:
        await db.sign_out(token)
    return {"status": "signed_out"}


def _admin_view(admin: AdminController) -> Dict[str, Any]:
    return {
        "jobs": [job.model_dump(mode="json") for job in admin.jobs],
        "applications": {
            job_id: [a.model_dump(mode="json") for a in applications]
            for job_id, applications in admin.applications.items()
        },
    }


@app.get("/admin/jobs")
async def admin_list_jobs(admin: AdminController = Depends(get_admin)) -> Dict[str, Any]:
    await admin.list_jobs()
    return _admin_view(admin)


@app.post("/admin/jobs", status_code=201)
async def admin_create_job(
    form: JobEditForm, admin: AdminController = Depends(get_admin)
) -> Dict[str, Any]:
    job = await admin.save_job(form)
    return job.model_dump(mode="json")


@app.put("/admin/jobs/{job_id}")
async def admin_update_job(
    job_id: str, form: JobEditForm, admin: AdminController = Depends(get_admin)
) -> Dict[str, Any]:
    job = await admin.save_job(form, job_id=job_id)
    return job.model_dump(mode="json")


@app.delete("/admin/jobs/{job_id}")
async def admin_delete_job(job_id: str, admin: AdminController = Depends(get_admin)) -> Dict[str, str]:
    await admin.delete_job(job_id)
    return {"status": "deleted", "id": job_id}


@app.post("/admin/jobs/{job_id}/toggle-status")
async def admin_toggle_status(job_id: str, admin: AdminController = Depends(get_admin)) -> Dict[str, Any]:
    job = await admin.toggle_status(job_id)
    return job.model_dump(mode="json")


@app.post("/admin/applications/{application_id}/toggle-processed")
async def admin_toggle_processed(
    application_id: str, admin: AdminController = Depends(get_admin)
) -> Dict[str, Any]:
    application = await admin.toggle_processed(application_id)
    return application.model_dump(mode="json")


def main():
    uvicorn.run("jobboard.api.main:app", host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
