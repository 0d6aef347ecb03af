"""Resume upload endpoint.

Accepts a multipart ``resume`` with ``jobId`` and ``fullName`` fields and
stores the file under ``<UPLOAD_DIR>/resumes/<jobId>/``. The response carries
the stored path relative to the public base URL.
"""

import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from ..config import settings
from ..errors import ValidationError
from ..models.application_models import ResumeFile
from ..utils import run_blocking
from .submission.validation import ALLOWED_RESUME_EXTENSIONS, check_resume_file

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])

UPLOAD_URL_PREFIX = "uploads"
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def safe_name(value: str, fallback: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9_-]`` with ``_``."""
    return _UNSAFE_CHARS.sub("_", value.strip()) or fallback


def _write_file(path: Path, content: bytes) -> None:
    os.makedirs(path.parent, exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/upload")
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    jobId: str = Form("default"),
    fullName: str = Form(""),
):
    if resume is None or not resume.filename:
        return _error(400, "No file uploaded or upload error")

    file = ResumeFile(
        filename=os.path.basename(resume.filename),
        content_type=resume.content_type or "",
        content=await resume.read(),
    )
    try:
        check_resume_file(file)
        if file.extension not in ALLOWED_RESUME_EXTENSIONS:
            raise ValidationError("Please upload a PDF or Word document", title="Invalid File")
    except ValidationError as e:
        logger.info(f"Rejected upload {file.filename!r}: {e.description}")
        return _error(400, e.description)

    job_dir = safe_name(jobId, "default")
    # Random suffix keeps same-second uploads for one applicant apart
    stem = f"{safe_name(fullName, 'resume')}_{int(time.time())}_{secrets.token_hex(3)}"
    filename = f"{stem}.{file.extension}"
    target = Path(settings.upload_dir) / "resumes" / job_dir / filename
    try:
        await run_blocking(_write_file, target, file.content)
    except OSError as e:
        logger.error(f"Failed to store resume at {target}: {str(e)}")
        return _error(500, "Failed to move uploaded file")

    logger.info(f"Stored resume {filename} ({file.size} bytes) for {job_dir}")
    return {"success": True, "resume_url": f"{UPLOAD_URL_PREFIX}/resumes/{job_dir}/{filename}"}
