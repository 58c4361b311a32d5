"""Pydantic models for jobmatch data structures."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class CandidatePreferences(BaseModel):
    """Job-search preferences stored alongside a candidate profile."""

    preferred_locations: list[str] = Field(
        default_factory=list,
        description="Places the candidate would like to work (free text)"
    )
    willing_to_relocate: bool = Field(
        default=False,
        description="Whether the candidate would move for the right job"
    )

    @field_validator("preferred_locations", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("willing_to_relocate", mode="before")
    @classmethod
    def _none_to_false(cls, value: Any) -> Any:
        return False if value is None else value


class CandidateProfile(BaseModel):
    """The matchable attributes of one job seeker."""

    id: str | None = None
    location: str | None = Field(
        default=None,
        description="City, region or 'Remote'"
    )
    years_experience: int | None = Field(
        default=None,
        description="Total years of professional experience"
    )
    expected_salary_min: float | None = None
    expected_salary_max: float | None = None
    skills: list[str] = Field(
        default_factory=list,
        description="Skill names in profile order; matched case-insensitively"
    )
    preferences: CandidatePreferences | None = None

    @classmethod
    def from_row(cls, row: dict) -> "CandidateProfile":
        """Build a profile from a ``candidate_profiles`` row with joined children.

        ``skills`` arrives as ``[{"skill_name": ...}, ...]`` and
        ``preferences`` as a one-element list (one-to-many join), a single
        object, or nothing at all.
        """
        skills = [
            s["skill_name"]
            for s in row.get("skills") or []
            if isinstance(s, dict) and s.get("skill_name")
        ]
        prefs = row.get("preferences")
        if isinstance(prefs, list):
            prefs = prefs[0] if prefs else None
        return cls(
            id=row.get("id"),
            location=row.get("location"),
            years_experience=row.get("years_experience"),
            expected_salary_min=row.get("expected_salary_min"),
            expected_salary_max=row.get("expected_salary_max"),
            skills=skills,
            preferences=CandidatePreferences(**prefs) if prefs else None,
        )


class JobTags(BaseModel):
    """Structured view of the free-form ``tags`` JSON on a job row."""

    skills: list[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def _only_string_lists(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [v for v in value if isinstance(v, str)]


class Job(BaseModel):
    """The matchable attributes of one job posting."""

    id: str
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    tags: JobTags = Field(default_factory=JobTags)
    minimum_experience: int | None = None
    experience_level: str | None = None
    salary_min: float | None = None
    salary_max: float | None = None

    @field_validator("title", "company", "location", "description", mode="before")
    @classmethod
    def _none_to_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _loose_tags(cls, value: Any) -> Any:
        if isinstance(value, (dict, JobTags)):
            return value
        return {}


class MatchDetails(BaseModel):
    """Explanation attached to a match score."""

    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(
        default_factory=list,
        description="Job skills the candidate lacks (at most five)"
    )
    experience_gap: int = Field(
        default=0,
        description="Required years minus candidate years; negative means surplus"
    )
    location_match: bool = False
    salary_in_range: bool = False


class JobMatchScore(BaseModel):
    """Result of scoring one candidate against one job."""

    job_id: str
    match_score: float = Field(ge=0, le=100)
    skills_match_score: float = Field(ge=0, le=100)
    experience_match_score: float = Field(ge=0, le=100)
    location_match_score: float = Field(ge=0, le=100)
    salary_match_score: float = Field(ge=0, le=100)
    match_details: MatchDetails


class SavedRecommendation(BaseModel):
    """A persisted match score read back from ``job_recommendations``."""

    id: str
    job_id: str
    match_score: float
    skills_match_score: float = 0
    experience_match_score: float = 0
    location_match_score: float = 0
    salary_match_score: float = 0
    match_details: MatchDetails = Field(default_factory=MatchDetails)
    viewed: bool = False
    dismissed: bool = False
    expires_at: str | None = None
    job: Job | None = None

    @field_validator("match_details", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any) -> Any:
        return {} if value is None else value
