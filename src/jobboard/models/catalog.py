"""Static lookup catalogue and the demo postings used to seed a fresh database."""

from datetime import datetime
from typing import Dict, List, Optional

from .job_models import ExperienceRange, Industry, Location, SalaryRange

INDUSTRIES: List[Industry] = [
    Industry(id="tech", name="Technology"),
    Industry(id="finance", name="Finance"),
    Industry(id="healthcare", name="Healthcare"),
    Industry(id="education", name="Education"),
    Industry(id="manufacturing", name="Manufacturing"),
    Industry(id="retail", name="Retail"),
]

LOCATIONS: List[Location] = [
    Location(id="mum", city="Mumbai", state="Maharashtra"),
    Location(id="blr", city="Bangalore", state="Karnataka"),
    Location(id="del", city="Delhi", state="Delhi"),
    Location(id="hyd", city="Hyderabad", state="Telangana"),
    Location(id="che", city="Chennai", state="Tamil Nadu"),
    Location(id="pun", city="Pune", state="Maharashtra"),
]

EXPERIENCE_RANGES: List[ExperienceRange] = [
    ExperienceRange(id="fresher", range="0-1 years", min_years=0, max_years=1),
    ExperienceRange(id="junior", range="1-3 years", min_years=1, max_years=3),
    ExperienceRange(id="mid", range="3-5 years", min_years=3, max_years=5),
    ExperienceRange(id="senior", range="5-10 years", min_years=5, max_years=10),
    ExperienceRange(id="lead", range="10+ years", min_years=10, max_years=None),
]

SALARY_RANGES: List[SalaryRange] = [
    SalaryRange(id="entry", range="3-5 LPA", min=300000, max=500000),
    SalaryRange(id="mid", range="5-10 LPA", min=500000, max=1000000),
    SalaryRange(id="senior", range="10-15 LPA", min=1000000, max=1500000),
    SalaryRange(id="lead", range="15-25 LPA", min=1500000, max=2500000),
    SalaryRange(id="executive", range="25+ LPA", min=2500000, max=None),
]

DEPARTMENTS: List[str] = [
    "Human Resources",
    "Account & Finance",
    "Sales & Marketing",
    "Information Technology",
    "Operations",
    "Customer Service",
    "Production",
    "Supply Chain",
    "Quality",
    "Administration",
    "Other",
]

GENDER_PREFERENCES: List[str] = ["male", "female", "any"]


def find_experience(value: str) -> Optional[ExperienceRange]:
    """Resolve an experience range by id or by its label."""
    needle = value.strip().lower()
    for exp in EXPERIENCE_RANGES:
        if exp.id == needle or exp.range.lower() == needle:
            return exp
    return None


def find_salary_range(value: Optional[str]) -> Optional[SalaryRange]:
    """Resolve a salary range by id or by its label."""
    if not value:
        return None
    needle = value.strip().lower()
    for salary in SALARY_RANGES:
        if salary.id == needle or salary.range.lower() == needle:
            return salary
    return None


def _seed(code, title, loc, exp, ind, dept, skills, description, salary, posted):
    return {
        "job_code": code,
        "title": title,
        "location": LOCATIONS[loc],
        "experience": EXPERIENCE_RANGES[exp],
        "industry": INDUSTRIES[ind],
        "department": dept,
        "key_skills": skills,
        "description": description,
        "salary_range": SALARY_RANGES[salary],
        "status": "Published",
        "date_posted": datetime.fromisoformat(posted),
    }


SEED_JOBS: List[Dict] = [
    _seed("J1001", "Senior Software Engineer", 1, 3, 0, "Engineering",
          ["React", "Node.js", "TypeScript", "AWS"],
          "We're looking for an experienced Software Engineer to join our growing team.",
          3, "2025-05-10"),
    _seed("J1002", "Financial Analyst", 0, 2, 1, "Finance",
          ["Financial Modeling", "Excel", "Data Analysis", "SQL"],
          "Seeking a detail-oriented Financial Analyst to support our finance team.",
          2, "2025-05-08"),
    _seed("J1003", "HR Manager", 3, 3, 0, "Human Resources",
          ["Recruitment", "Employee Relations", "Performance Management", "HRIS"],
          "Looking for an experienced HR Manager to lead our HR initiatives.",
          2, "2025-05-11"),
    _seed("J1004", "Product Manager", 1, 3, 0, "Product",
          ["Product Strategy", "Agile", "User Experience", "Market Research"],
          "We're hiring a Product Manager to drive our product vision and roadmap.",
          3, "2025-05-07"),
    _seed("J1005", "Frontend Developer", 5, 1, 0, "Engineering",
          ["JavaScript", "React", "HTML", "CSS"],
          "Seeking a talented Frontend Developer to create responsive web applications.",
          1, "2025-05-12"),
    _seed("J1006", "Data Scientist", 1, 2, 0, "Data Science",
          ["Python", "Machine Learning", "SQL", "Data Visualization"],
          "Join our data science team to solve complex problems with data-driven solutions.",
          2, "2025-05-09"),
    _seed("J1007", "Marketing Manager", 0, 3, 5, "Marketing",
          ["Digital Marketing", "Brand Management", "Market Research", "Campaign Management"],
          "Looking for a Marketing Manager to develop and implement marketing strategies.",
          2, "2025-05-06"),
    _seed("J1008", "Operations Manager", 4, 3, 4, "Operations",
          ["Operations Management", "Process Improvement", "Supply Chain", "Team Leadership"],
          "Seeking an experienced Operations Manager to optimize our operational processes.",
          2, "2025-05-05"),
]
