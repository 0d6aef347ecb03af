"""Job postings and the lookup values they reference."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    PUBLISHED = "Published"
    DRAFT = "Draft"

    def toggled(self) -> "JobStatus":
        return JobStatus.DRAFT if self is JobStatus.PUBLISHED else JobStatus.PUBLISHED


class Industry(BaseModel):
    id: str
    name: str


class Location(BaseModel):
    id: str
    city: str
    state: str

    @property
    def label(self) -> str:
        return f"{self.city}, {self.state}"


class ExperienceRange(BaseModel):
    id: str
    range: str
    min_years: int = 0
    max_years: Optional[int] = None


class SalaryRange(BaseModel):
    id: str
    range: str
    min: int = 0
    max: Optional[int] = None


class Job(BaseModel):
    """A job posting in its canonical shape."""

    id: str
    job_code: str
    title: str
    location: Location
    experience: ExperienceRange
    industry: Industry
    department: str = ""
    key_skills: List[str] = []
    description: str = ""
    responsibilities: List[str] = []
    salary_range: Optional[SalaryRange] = None
    ctc: Optional[str] = None
    gender: Optional[str] = None
    status: JobStatus = JobStatus.DRAFT
    date_posted: Optional[datetime] = None
    user_id: Optional[str] = None

    @property
    def is_published(self) -> bool:
        return self.status == JobStatus.PUBLISHED


class FilterCriteria(BaseModel):
    """Ephemeral filter state of the public job list."""

    industry_id: Optional[str] = None
    location_id: Optional[str] = None
    experience_id: Optional[str] = None
    salary_id: Optional[str] = None
    gender: Optional[str] = None
    search: str = ""

    @property
    def is_empty(self) -> bool:
        return not any(
            (
                self.industry_id,
                self.location_id,
                self.experience_id,
                self.salary_id,
                self.gender,
                self.search.strip(),
            )
        )

    def cleared(self) -> "FilterCriteria":
        return FilterCriteria()


class JobEditForm(BaseModel):
    """Admin create/edit form for a job posting.

    ``location`` is a ``"City, State"`` label and ``industry`` an industry
    name; both may introduce new lookup values. ``key_skills`` and
    ``responsibilities`` are newline-separated.
    """

    position: str = Field(min_length=2)
    job_code: str = Field(min_length=2)
    location: str = Field(min_length=2)
    experience: str = Field(min_length=2)
    industry: str = Field(min_length=2)
    description: str = Field(min_length=10)
    key_skills: str = Field(min_length=10)
    responsibilities: str = ""
    department: str = ""
    salary_range: Optional[str] = None
    ctc: Optional[str] = None
    gender: Optional[str] = None
    status: bool = False

    def skills_list(self) -> List[str]:
        return [line.strip() for line in self.key_skills.split("\n") if line.strip()]

    def responsibilities_list(self) -> List[str]:
        return [line.strip() for line in self.responsibilities.split("\n") if line.strip()]
