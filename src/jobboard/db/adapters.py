"""Conversion between stored rows and the canonical ``Job`` model.

Rows written by this service hold structured JSON for location, industry,
experience and salary range. Older rows may carry freeform strings
(``"Bangalore, Karnataka"``, ``"Technology"``, ``"5-10 years"``) or the
camel-cased column names of earlier exports; they are read here and
rewritten in the canonical shape on the next save.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.catalog import find_experience, find_salary_range
from ..models.job_models import (
    ExperienceRange,
    Industry,
    Job,
    JobStatus,
    Location,
    SalaryRange,
)

_RANGE_RE = re.compile(r"(\d+)\s*(?:-\s*(\d+)|\+)?")


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")


def _first(row: Dict[str, Any], *keys: str, default=None):
    for key in keys:
        if row.get(key) not in (None, ""):
            return row[key]
    return default


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in re.split(r"[\n,]", value) if item.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


def location_from_value(value: Any) -> Location:
    if isinstance(value, dict):
        return Location(
            id=value.get("id") or slugify(f"{value.get('city', '')}-{value.get('state', '')}"),
            city=value.get("city", ""),
            state=value.get("state", ""),
        )
    city, _, state = str(value or "").partition(",")
    city, state = city.strip(), state.strip()
    return Location(id=slugify(f"{city}-{state}" if state else city), city=city, state=state)


def industry_from_value(value: Any) -> Industry:
    if isinstance(value, dict):
        name = value.get("name", "")
        return Industry(id=value.get("id") or slugify(name), name=name)
    name = str(value or "").strip()
    return Industry(id=slugify(name), name=name)


def experience_from_value(value: Any) -> ExperienceRange:
    if isinstance(value, dict):
        return ExperienceRange(
            id=value.get("id") or slugify(value.get("range", "")),
            range=value.get("range", ""),
            min_years=_first(value, "min_years", "minYears", default=0),
            max_years=_first(value, "max_years", "maxYears"),
        )
    label = str(value or "").strip()
    known = find_experience(label)
    if known is not None:
        return known
    match = _RANGE_RE.search(label)
    min_years = int(match.group(1)) if match else 0
    max_years = int(match.group(2)) if match and match.group(2) else None
    return ExperienceRange(id=slugify(label), range=label, min_years=min_years, max_years=max_years)


def salary_from_value(value: Any) -> Optional[SalaryRange]:
    if not value:
        return None
    if isinstance(value, dict):
        return SalaryRange(
            id=value.get("id") or slugify(value.get("range", "")),
            range=value.get("range", ""),
            min=value.get("min") or 0,
            max=value.get("max"),
        )
    label = str(value).strip()
    return find_salary_range(label) or SalaryRange(id=slugify(label), range=label)


def _gender(value: Any) -> Optional[str]:
    if not value:
        return None
    value = str(value).strip().lower()
    return None if value in ("", "none") else value


def _timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def job_from_row(row: Dict[str, Any]) -> Job:
    """Build a ``Job`` from a stored row in the canonical or a legacy shape."""
    return Job(
        id=str(row["id"]),
        job_code=str(_first(row, "job_code", "jobId", "id")),
        title=_first(row, "position", "title", default=""),
        location=location_from_value(row.get("location")),
        experience=experience_from_value(row.get("experience")),
        industry=industry_from_value(row.get("industry")),
        department=row.get("department") or "",
        key_skills=_string_list(_first(row, "keyskills", "keySkills", "key_skills")),
        description=row.get("description") or "",
        responsibilities=_string_list(row.get("responsibilities")),
        salary_range=salary_from_value(_first(row, "salary_range", "salaryRange")),
        ctc=row.get("ctc") or None,
        gender=_gender(row.get("gender")),
        status=JobStatus(row.get("status") or JobStatus.DRAFT.value),
        date_posted=_timestamp(_first(row, "dateposted", "datePosted", "date_posted")),
        user_id=row.get("user_id"),
    )


def job_to_row(job: Job) -> Dict[str, Any]:
    """Serialise a ``Job`` into the canonical ``jobs`` table shape."""
    return {
        "id": job.id,
        "job_code": job.job_code,
        "position": job.title,
        "location": job.location.model_dump(),
        "experience": job.experience.model_dump(),
        "industry": job.industry.model_dump(),
        "department": job.department,
        "keyskills": list(job.key_skills),
        "description": job.description,
        "responsibilities": list(job.responsibilities),
        "salary_range": job.salary_range.model_dump() if job.salary_range else None,
        "ctc": job.ctc,
        "gender": job.gender,
        "status": job.status.value,
        "dateposted": job.date_posted,
        "user_id": job.user_id,
    }
