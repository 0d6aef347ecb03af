"""
Data models and schemas for the job board.
"""

from .application_models import (
    FIELD_LABELS,
    OTHER_DEPARTMENT,
    REQUIRED_FIELDS,
    Application,
    ApplicationForm,
    GeneralProfile,
    ResumeFile,
    Session,
)
from .job_models import (
    ExperienceRange,
    FilterCriteria,
    Industry,
    Job,
    JobEditForm,
    JobStatus,
    Location,
    SalaryRange,
)

__all__ = [
    "FIELD_LABELS",
    "OTHER_DEPARTMENT",
    "REQUIRED_FIELDS",
    "Application",
    "ApplicationForm",
    "GeneralProfile",
    "ResumeFile",
    "Session",
    "ExperienceRange",
    "FilterCriteria",
    "Industry",
    "Job",
    "JobEditForm",
    "JobStatus",
    "Location",
    "SalaryRange",
]
