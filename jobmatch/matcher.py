"""Matcher module - scores job postings against a candidate profile.

Four independent sub-scores (skills, experience, location, salary) are
combined with fixed weights into one 0-100 match score.  Everything here is
pure: no I/O, no shared state.
"""

from collections.abc import Iterable

from .models import CandidateProfile, Job, JobMatchScore, JobTags, MatchDetails

# Skills carry the most weight; the four weights sum to 1.0.
WEIGHTS: dict[str, float] = {
    "skills": 0.40,
    "experience": 0.25,
    "location": 0.20,
    "salary": 0.15,
}

MAX_MISSING_SKILLS = 5

# Single-sided salary ranges are widened by this factor to approximate a band.
SALARY_BAND_FACTOR = 1.5

_REMOTE_MARKERS = ("remote", "anywhere")


def score_skills(
    candidate_skills: list[str],
    job_description: str,
    job_tags: JobTags | None,
) -> tuple[float, list[str], list[str]]:
    """Score how many of the candidate's skills the job asks for.

    A candidate skill counts as matched when it appears as a substring of
    the description or of any tagged job skill.  Missing skills are tagged
    job skills with no exact (case-insensitive) counterpart in the profile.

    Returns:
        (score, matched, missing) where score is the matched share in percent.
    """
    if not candidate_skills:
        return 0.0, [], []

    job_text = (job_description or "").lower()
    job_skills = job_tags.skills if job_tags is not None else []
    job_skills_lower = [js.lower() for js in job_skills]

    matched = []
    for skill in candidate_skills:
        skill_lower = skill.lower()
        if skill_lower in job_text or any(skill_lower in js for js in job_skills_lower):
            matched.append(skill)

    candidate_lower = {cs.lower() for cs in candidate_skills}
    missing = [js for js in job_skills if js.lower() not in candidate_lower]

    score = len(matched) / len(candidate_skills) * 100
    return score, matched, missing


def score_experience(
    candidate_years: int | None,
    job_min_experience: int | None,
    job_experience_level: str | None,
) -> tuple[float, int]:
    """Score the candidate's years against the job's minimum.

    ``job_experience_level`` only counts as "the job states a requirement";
    it does not change the number.

    Returns:
        (score, gap) where gap is required minus actual years.
    """
    if candidate_years is None:
        return 50.0, 0
    if job_min_experience is None and not job_experience_level:
        return 100.0, 0

    gap = (job_min_experience or 0) - candidate_years
    if gap <= 0:
        return 100.0, gap
    if gap <= 1:
        return 80.0, gap
    if gap <= 2:
        return 60.0, gap
    return float(max(0, 40 - gap * 10)), gap


def score_location(
    candidate_location: str | None,
    willing_to_relocate: bool | None,
    job_location: str,
    preferred_locations: Iterable[str] = (),
) -> tuple[float, bool]:
    """Score geographic compatibility. Returns (score, match)."""
    if not candidate_location:
        return 50.0, False

    cand_loc = candidate_location.lower()
    job_loc = (job_location or "").lower()

    if any(marker in job_loc for marker in _REMOTE_MARKERS):
        return 100.0, True

    # A job with no location is contained in every candidate location and
    # scores as a match.
    if cand_loc == job_loc or cand_loc in job_loc or job_loc in cand_loc:
        return 100.0, True

    if any(loc.lower() in job_loc for loc in preferred_locations or ()):
        return 90.0, True

    if willing_to_relocate:
        return 70.0, True

    return 20.0, False


def score_salary(
    candidate_min: float | None,
    candidate_max: float | None,
    job_min: float | None,
    job_max: float | None,
) -> tuple[float, bool]:
    """Score the overlap between expected and offered salary bands.

    Returns:
        (score, in_range)
    """
    if candidate_min is None and job_min is None:
        return 50.0, False
    if job_min is None and job_max is None and candidate_min is not None:
        return 30.0, False
    if candidate_min is None and candidate_max is None:
        return 100.0, True

    cand_min = candidate_min or 0
    cand_max = candidate_max if candidate_max is not None else cand_min * SALARY_BAND_FACTOR
    j_min = job_min or 0
    j_max = job_max if job_max is not None else j_min * SALARY_BAND_FACTOR

    if j_max >= cand_min and j_min <= cand_max:
        overlap = min(j_max, cand_max) - max(j_min, cand_min)
        cand_range = cand_max - cand_min
        overlap_pct = overlap / cand_range * 100 if cand_range > 0 else 100.0
        return _clamp(overlap_pct), True

    if j_max < cand_min:
        # cand_min can only be 0 here when the job band is negative
        gap_pct = (cand_min - j_max) / cand_min * 100 if cand_min > 0 else 100.0
        return _clamp(50 - gap_pct), False

    if j_min > cand_max:
        return 100.0, True

    return 50.0, False


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def calculate_job_match(candidate: CandidateProfile, job: Job) -> JobMatchScore:
    """
    Score one job against one candidate.

    Args:
        candidate: The candidate's matchable profile.
        job: The job posting.

    Returns:
        Overall and per-factor scores (0-100, two decimals) with details.
    """
    prefs = candidate.preferences

    skills_score, matched, missing = score_skills(candidate.skills, job.description, job.tags)
    experience_score, gap = score_experience(
        candidate.years_experience,
        job.minimum_experience,
        job.experience_level,
    )
    location_score, location_match = score_location(
        candidate.location,
        prefs.willing_to_relocate if prefs else None,
        job.location,
        prefs.preferred_locations if prefs else (),
    )
    salary_score, in_range = score_salary(
        candidate.expected_salary_min,
        candidate.expected_salary_max,
        job.salary_min,
        job.salary_max,
    )

    total = (
        skills_score * WEIGHTS["skills"]
        + experience_score * WEIGHTS["experience"]
        + location_score * WEIGHTS["location"]
        + salary_score * WEIGHTS["salary"]
    )

    return JobMatchScore(
        job_id=job.id,
        match_score=round(total, 2),
        skills_match_score=round(skills_score, 2),
        experience_match_score=round(experience_score, 2),
        location_match_score=round(location_score, 2),
        salary_match_score=round(salary_score, 2),
        match_details=MatchDetails(
            matched_skills=matched,
            missing_skills=missing[:MAX_MISSING_SKILLS],
            experience_gap=gap,
            location_match=location_match,
            salary_in_range=in_range,
        ),
    )


def rank_jobs(
    candidate: CandidateProfile,
    jobs: Iterable[Job],
    limit: int = 10,
    min_score: float = 50,
    exclude_ids: Iterable[str] | None = None,
) -> list[JobMatchScore]:
    """
    Score jobs and return the best matches.

    Args:
        candidate: The candidate's matchable profile.
        jobs: Jobs to consider, in the caller's preferred order.
        limit: Maximum number of matches to return.
        min_score: Minimum overall score to keep.
        exclude_ids: Job ids to skip (e.g. jobs already applied to).

    Returns:
        Matches sorted by score descending; equal scores keep input order.
    """
    if limit <= 0:
        return []
    excluded = set(exclude_ids or ())
    scored = [calculate_job_match(candidate, job) for job in jobs if job.id not in excluded]
    good = [m for m in scored if m.match_score >= min_score]
    good.sort(key=lambda m: m.match_score, reverse=True)
    return good[:limit]
