"""Shared pytest fixtures for jobmatch tests."""

import pytest

from jobmatch.models import CandidatePreferences, CandidateProfile, Job, JobTags


@pytest.fixture()
def sample_candidate() -> CandidateProfile:
    return CandidateProfile(
        id="cand-001",
        location="Berlin",
        years_experience=5,
        expected_salary_min=60000,
        expected_salary_max=80000,
        skills=["Python", "SQL", "Docker"],
        preferences=CandidatePreferences(
            preferred_locations=["Munich", "Hamburg"],
            willing_to_relocate=False,
        ),
    )


@pytest.fixture()
def sample_job() -> Job:
    return Job(
        id="job-001",
        title="Backend Engineer",
        company="Acme GmbH",
        location="Berlin, Germany",
        description="We build Python services on PostgreSQL and ship them with Docker.",
        tags=JobTags(skills=["Python", "SQL", "Kubernetes"]),
        minimum_experience=4,
        experience_level="Senior",
        salary_min=65000,
        salary_max=85000,
    )


@pytest.fixture()
def profile_row() -> dict:
    """A ``candidate_profiles`` row as returned by the joined select."""
    return {
        "id": "cand-001",
        "user_id": "user-001",
        "location": "Berlin",
        "years_experience": 5,
        "expected_salary_min": 60000,
        "expected_salary_max": 80000,
        "headline": "Backend engineer",
        "skills": [{"skill_name": "Python"}, {"skill_name": "SQL"}, {"skill_name": "Docker"}],
        "preferences": [
            {
                "user_id": "user-001",
                "preferred_locations": ["Munich"],
                "willing_to_relocate": True,
                "preferred_industries": ["FinTech"],
            }
        ],
    }


@pytest.fixture()
def job_row() -> dict:
    """A ``jobs`` row with columns the matcher does not use."""
    return {
        "id": "job-001",
        "title": "Backend Engineer",
        "company": "Acme GmbH",
        "location": "Berlin, Germany",
        "description": "Python and Docker.",
        "tags": {"skills": ["Python", "Kubernetes"], "benefits": ["Gym"]},
        "minimum_experience": 4,
        "experience_level": "Senior",
        "salary_min": 65000,
        "salary_max": 85000,
        "status": "active",
        "employment_type": "full_time",
        "created_at": "2026-10-01T09:00:00+00:00",
    }
