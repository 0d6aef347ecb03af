"""Filter engine for the public job list.

Every function here is pure: the input list is never mutated and the
surviving jobs keep their input order.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..models.catalog import EXPERIENCE_RANGES, SALARY_RANGES
from ..models.job_models import FilterCriteria, Industry, Job, Location

INCLUSIVE_GENDERS = ("", "any", "none")


@dataclass(frozen=True)
class Lookups:
    """Industry and location detail sets; ``None`` means not loaded yet."""

    industries: Optional[Sequence[Industry]] = None
    locations: Optional[Sequence[Location]] = None

    def industry(self, industry_id: Optional[str]) -> Optional[Industry]:
        if not industry_id or self.industries is None:
            return None
        return next((i for i in self.industries if i.id == industry_id), None)

    def location(self, location_id: Optional[str]) -> Optional[Location]:
        if not location_id or self.locations is None:
            return None
        return next((loc for loc in self.locations if loc.id == location_id), None)


def _same(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").strip().casefold() == (b or "").strip().casefold()


def matches_search(job: Job, query: str) -> bool:
    needle = query.strip().casefold()
    if not needle:
        return True
    return (
        needle in job.title.casefold()
        or any(needle in skill.casefold() for skill in job.key_skills)
        or needle in job.description.casefold()
    )


def matches_gender(job: Job, gender: Optional[str]) -> bool:
    if not gender or gender.strip().casefold() in INCLUSIVE_GENDERS:
        return True
    job_gender = (job.gender or "").strip().casefold()
    return job_gender in INCLUSIVE_GENDERS or job_gender == gender.strip().casefold()


def build_predicates(
    criteria: FilterCriteria, lookups: Lookups
) -> List[Callable[[Job], bool]]:
    """Return one predicate per active criterion.

    Industry and location criteria whose id cannot be resolved against a
    loaded lookup are left out.
    """
    predicates: List[Callable[[Job], bool]] = []

    industry = lookups.industry(criteria.industry_id)
    if industry is not None:
        predicates.append(lambda job: _same(job.industry.name, industry.name))

    location = lookups.location(criteria.location_id)
    if location is not None:
        predicates.append(
            lambda job: _same(job.location.city, location.city)
            and _same(job.location.state, location.state)
        )

    if criteria.experience_id:
        predicates.append(lambda job: job.experience.id == criteria.experience_id)

    if criteria.salary_id:
        predicates.append(
            lambda job: job.salary_range is not None
            and job.salary_range.id == criteria.salary_id
        )

    if criteria.gender:
        predicates.append(lambda job: matches_gender(job, criteria.gender))

    if criteria.search.strip():
        predicates.append(lambda job: matches_search(job, criteria.search))

    return predicates


def apply_filters(
    all_jobs: Sequence[Job], criteria: FilterCriteria, lookups: Lookups = Lookups()
) -> List[Job]:
    """Reduce ``all_jobs`` to the jobs matching every active criterion."""
    predicates = build_predicates(criteria, lookups)
    return [job for job in all_jobs if all(p(job) for p in predicates)]


def active_filter_labels(criteria: FilterCriteria, lookups: Lookups) -> List[str]:
    """Labels for the active filter badges, in display order."""
    labels = []
    industry = lookups.industry(criteria.industry_id)
    if industry is not None:
        labels.append(industry.name)
    location = lookups.location(criteria.location_id)
    if location is not None:
        labels.append(location.city)
    experience = next((e for e in EXPERIENCE_RANGES if e.id == criteria.experience_id), None)
    if experience is not None:
        labels.append(experience.range)
    salary = next((s for s in SALARY_RANGES if s.id == criteria.salary_id), None)
    if salary is not None:
        labels.append(salary.range)
    if criteria.gender:
        labels.append(criteria.gender.capitalize())
    return labels
