"""Editable state of the application form."""

import logging
from typing import Optional

from ...errors import ValidationError
from ...models.application_models import ApplicationForm, ResumeFile
from .validation import check_resume_file

logger = logging.getLogger(__name__)


class ApplicationFormState:
    """Field values, the attached resume and the inline file error."""

    def __init__(self, max_resume_bytes: Optional[int] = None):
        self.max_resume_bytes = max_resume_bytes
        self.fields = ApplicationForm()
        self.resume: Optional[ResumeFile] = None
        self.file_error: Optional[str] = None

    def update(self, **values: str) -> None:
        self.fields = self.fields.model_copy(update=values)

    def select_resume(self, resume: ResumeFile) -> bool:
        """Attach ``resume`` if it passes the type and size checks.

        A rejected file leaves the previous selection in place and sets
        ``file_error``.
        """
        self.file_error = None
        try:
            check_resume_file(resume, self.max_resume_bytes)
        except ValidationError as e:
            logger.info(f"Rejected resume {resume.filename!r}: {e.description}")
            self.file_error = e.description
            return False
        self.resume = resume
        return True

    def clear_resume(self) -> None:
        self.resume = None
        self.file_error = None

    def reset(self) -> None:
        self.fields = ApplicationForm()
        self.clear_resume()
