"""Tests for the job filter engine."""

from jobboard.models.catalog import EXPERIENCE_RANGES, INDUSTRIES, LOCATIONS, SALARY_RANGES
from jobboard.models.job_models import FilterCriteria, Industry, Location
from jobboard.services.filtering import (
    Lookups,
    active_filter_labels,
    apply_filters,
    matches_gender,
)

LOOKUPS = Lookups(industries=INDUSTRIES, locations=LOCATIONS)


def _jobs(make_job):
    return [
        make_job(job_code="J1", title="Frontend Developer", key_skills=["React", "CSS"],
                 location=LOCATIONS[5], experience=EXPERIENCE_RANGES[1], salary_range=SALARY_RANGES[1]),
        make_job(job_code="J2", title="Financial Analyst", industry=INDUSTRIES[1],
                 key_skills=["Excel"], location=LOCATIONS[0], gender="female"),
        make_job(job_code="J3", title="Data Scientist", key_skills=["Python", "SQL"],
                 description="Machine learning on large data sets", salary_range=None),
        make_job(job_code="J4", title="Operations Manager", industry=INDUSTRIES[4],
                 location=LOCATIONS[4], gender="male"),
    ]


def test_empty_criteria_returns_everything_in_order(make_job):
    jobs = _jobs(make_job)
    assert apply_filters(jobs, FilterCriteria(), LOOKUPS) == jobs


def test_result_is_ordered_subset_of_input(make_job):
    jobs = _jobs(make_job)
    for criteria in (
        FilterCriteria(industry_id="tech"),
        FilterCriteria(search="a"),
        FilterCriteria(gender="female"),
        FilterCriteria(location_id="blr", search="data"),
    ):
        result = apply_filters(jobs, criteria, LOOKUPS)
        assert all(job in jobs for job in result)
        positions = [jobs.index(job) for job in result]
        assert positions == sorted(positions)


def test_industry_matches_by_name_case_insensitively(make_job):
    jobs = _jobs(make_job)
    lookups = Lookups(industries=[Industry(id="x", name="TECHNOLOGY")], locations=LOCATIONS)
    result = apply_filters(jobs, FilterCriteria(industry_id="x"), lookups)
    assert [job.job_code for job in result] == ["J1", "J3"]


def test_location_matches_city_and_state(make_job):
    jobs = _jobs(make_job)
    lookups = Lookups(industries=INDUSTRIES, locations=[Location(id="p", city="pune", state="MAHARASHTRA")])
    result = apply_filters(jobs, FilterCriteria(location_id="p"), lookups)
    assert [job.job_code for job in result] == ["J1"]


def test_unloaded_or_unknown_lookups_make_criterion_inactive(make_job):
    jobs = _jobs(make_job)
    assert apply_filters(jobs, FilterCriteria(industry_id="tech"), Lookups()) == jobs
    assert apply_filters(jobs, FilterCriteria(location_id="nowhere"), LOOKUPS) == jobs


def test_experience_and_salary_match_by_id(make_job):
    jobs = _jobs(make_job)
    assert [j.job_code for j in apply_filters(jobs, FilterCriteria(experience_id="junior"), LOOKUPS)] == ["J1"]
    # A job without a salary range never matches a salary filter
    result = apply_filters(jobs, FilterCriteria(salary_id="lead"), LOOKUPS)
    assert "J3" not in [j.job_code for j in result]
    assert [j.job_code for j in result] == ["J2", "J4"]


def test_gender_filter_keeps_unrestricted_jobs(make_job):
    jobs = _jobs(make_job)
    result = apply_filters(jobs, FilterCriteria(gender="Female"), LOOKUPS)
    assert [job.job_code for job in result] == ["J1", "J2", "J3"]


def test_matches_gender_with_any_selected(make_job):
    job = make_job(gender="male")
    assert matches_gender(job, "any")
    assert matches_gender(job, None)
    assert not matches_gender(job, "female")


def test_search_matches_title_skills_or_description(make_job):
    jobs = _jobs(make_job)
    assert [j.job_code for j in apply_filters(jobs, FilterCriteria(search="react"), LOOKUPS)] == ["J1"]
    assert [j.job_code for j in apply_filters(jobs, FilterCriteria(search="ANALYST"), LOOKUPS)] == ["J2"]
    assert [j.job_code for j in apply_filters(jobs, FilterCriteria(search="machine"), LOOKUPS)] == ["J3"]


def test_whitespace_search_is_a_no_op(make_job):
    jobs = _jobs(make_job)
    assert apply_filters(jobs, FilterCriteria(search="   "), LOOKUPS) == jobs


def test_criteria_are_anded(make_job):
    jobs = _jobs(make_job)
    criteria = FilterCriteria(industry_id="tech", search="python")
    assert [j.job_code for j in apply_filters(jobs, criteria, LOOKUPS)] == ["J3"]
    criteria = FilterCriteria(industry_id="finance", search="python")
    assert apply_filters(jobs, criteria, LOOKUPS) == []


def test_input_list_is_not_mutated(make_job):
    jobs = _jobs(make_job)
    snapshot = list(jobs)
    apply_filters(jobs, FilterCriteria(search="data"), LOOKUPS)
    assert jobs == snapshot


def test_criteria_helpers():
    assert FilterCriteria().is_empty
    assert FilterCriteria(search="  ").is_empty
    criteria = FilterCriteria(industry_id="tech", search="x")
    assert not criteria.is_empty
    assert criteria.cleared().is_empty


def test_active_filter_labels():
    criteria = FilterCriteria(industry_id="tech", location_id="blr", search="react")
    labels = active_filter_labels(criteria, LOOKUPS)
    assert "Technology" in labels
    assert "Bangalore" in labels
