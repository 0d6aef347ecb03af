"""Validation rules for the application form and the attached resume."""

from typing import Optional

from ...config import settings
from ...errors import ValidationError
from ...models.application_models import REQUIRED_FIELDS, ApplicationForm, ResumeFile

ALLOWED_RESUME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
ALLOWED_RESUME_EXTENSIONS = frozenset({"pdf", "doc", "docx"})


def check_resume_file(resume: ResumeFile, max_bytes: Optional[int] = None) -> None:
    """Reject a resume that is not a PDF/Word document or is too large.

    Raises:
        ValidationError: With the inline message to show next to the picker
    """
    max_bytes = max_bytes or settings.max_resume_bytes
    if resume.content_type not in ALLOWED_RESUME_TYPES:
        raise ValidationError("Please upload a PDF or Word document", title="Invalid File")
    if resume.size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise ValidationError(f"File size should be less than {limit_mb}MB", title="File Too Large")


def missing_fields(form: ApplicationForm) -> list:
    return [name for name in REQUIRED_FIELDS if not getattr(form, name).strip()]


def validate_submission(form: ApplicationForm, resume: Optional[ResumeFile]) -> None:
    """Fail fast on the first missing piece of the submission.

    Raises:
        ValidationError: ``Missing Information`` for any empty required field
            (including the "Other" department override), ``Resume Required``
            when no resume is attached
    """
    if missing_fields(form):
        raise ValidationError("Please fill in all required fields")
    if form.wants_other_department and not form.other_department.strip():
        raise ValidationError("Please specify the other department")
    if resume is None:
        raise ValidationError("Please upload your resume", title="Resume Required")
