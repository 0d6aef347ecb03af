"""Application form state and the records it produces."""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

OTHER_DEPARTMENT = "Other"

# Fields that must be non-empty before a submission leaves the form.
REQUIRED_FIELDS = (
    "full_name",
    "email",
    "phone",
    "years_of_experience",
    "current_company",
    "current_designation",
    "current_ctc",
    "current_take_home",
    "expected_ctc",
    "notice_period",
    "location",
    "department",
)

# Human-readable keys used when the form is flattened for the webhook.
FIELD_LABELS: Dict[str, str] = {
    "full_name": "Full Name",
    "email": "Email",
    "phone": "Contact Number",
    "years_of_experience": "Years Of Experience",
    "current_company": "Current Company Name",
    "current_designation": "Current Designation",
    "current_ctc": "Current CTC (per annum)",
    "current_take_home": "Current Take Home Salary (per month)",
    "expected_ctc": "Expected CTC (per annum)",
    "notice_period": "What is your notice period ?(in days)",
    "location": "What is your current location ?",
    "department": "In which department are you searching for job ?",
    "other_department": "Other",
}


class ApplicationForm(BaseModel):
    """Values typed into the application form."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    years_of_experience: str = ""
    current_company: str = ""
    current_designation: str = ""
    current_ctc: str = ""
    current_take_home: str = ""
    expected_ctc: str = ""
    notice_period: str = ""
    location: str = ""
    department: str = ""
    other_department: str = ""

    @property
    def wants_other_department(self) -> bool:
        return self.department == OTHER_DEPARTMENT


class ResumeFile(BaseModel):
    """A resume picked by the applicant."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        return ext.lower() if dot else ""


class ApplicantRecord(BaseModel):
    """Fields shared by applications and general profiles."""

    id: Optional[str] = None
    fullname: str
    email: str
    phone: str
    yearsofexperience: str
    currentcompany: str
    currentdesignation: str
    currentctc: str
    currenttakehome: str
    expectedctc: str
    noticeperiod: str
    location: str
    department: str
    otherdepartment: Optional[str] = None
    resume_url: str
    processed: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_form(cls, form: ApplicationForm, resume_url: str, **extra):
        return cls(
            fullname=form.full_name,
            email=form.email,
            phone=form.phone,
            yearsofexperience=form.years_of_experience,
            currentcompany=form.current_company,
            currentdesignation=form.current_designation,
            currentctc=form.current_ctc,
            currenttakehome=form.current_take_home,
            expectedctc=form.expected_ctc,
            noticeperiod=form.notice_period,
            location=form.location,
            department=form.department,
            otherdepartment=form.other_department if form.wants_other_department else None,
            resume_url=resume_url,
            processed=False,
            **extra,
        )


class Application(ApplicantRecord):
    job_id: Optional[str] = None


class GeneralProfile(ApplicantRecord):
    updated_at: Optional[datetime] = None


class Session(BaseModel):
    """An authenticated admin session; passed explicitly to admin operations."""

    token: str
    user_id: str
    email: str
    expires_at: datetime
