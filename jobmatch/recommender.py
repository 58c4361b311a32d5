"""Recommendation flow - glue between the Supabase layer and the matcher."""

import logging

from supabase import Client

from . import db
from .matcher import rank_jobs
from .models import JobMatchScore, SavedRecommendation

log = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_MIN_SCORE = 50

# How many of the newest active jobs are scored per candidate.
CANDIDATE_POOL_SIZE = 100


def get_job_recommendations(
    client: Client,
    user_id: str,
    limit: int = DEFAULT_LIMIT,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[JobMatchScore]:
    """
    Compute fresh recommendations for a user without saving them.

    Args:
        client: Supabase client used for all reads.
        user_id: The candidate's auth user id.
        limit: Maximum number of matches to return.
        min_score: Minimum overall match score.

    Returns:
        Best matches first.  Empty when the user has no candidate profile
        or there are no active jobs.

    Raises:
        db.DataUnavailableError: If Supabase cannot be queried.
    """
    profile = db.load_candidate_profile(client, user_id)
    if profile is None:
        log.info("user=%s has no candidate profile, nothing to recommend", user_id)
        return []

    applied = db.get_applied_job_ids(client, user_id)
    jobs = db.load_active_jobs(client, exclude_ids=applied, max_count=CANDIDATE_POOL_SIZE)
    if not jobs:
        return []

    matches = rank_jobs(profile, jobs, limit=limit, min_score=min_score, exclude_ids=applied)
    log.info(
        "user=%s — %d of %d jobs scored >= %s",
        user_id,
        len(matches),
        len(jobs),
        min_score,
    )
    return matches


def refresh_recommendations(
    client: Client,
    user_id: str,
    limit: int = DEFAULT_LIMIT,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[JobMatchScore]:
    """Recompute recommendations and overwrite the stored ones."""
    matches = get_job_recommendations(client, user_id, limit=limit, min_score=min_score)
    if matches:
        db.save_recommendations(client, user_id, matches)
    return matches


def load_recommendations(
    client: Client,
    user_id: str,
    include_viewed: bool = False,
    limit: int = DEFAULT_LIMIT,
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[SavedRecommendation]:
    """Return stored recommendations, generating them first if none are fresh.

    Saved rows that have not expired are reused.  Otherwise new matches are
    computed, saved, and read back so callers always get the stored shape
    (with ids and the joined job).  Either way at most *limit* rows scoring
    at least *min_score* are returned.
    """
    saved = _top(
        db.get_saved_recommendations(client, user_id, include_viewed=include_viewed),
        limit,
        min_score,
    )
    if saved:
        return saved

    matches = refresh_recommendations(client, user_id, limit=limit, min_score=min_score)
    if not matches:
        return []
    return _top(
        db.get_saved_recommendations(client, user_id, include_viewed=include_viewed),
        limit,
        min_score,
    )


def _top(
    recommendations: list[SavedRecommendation],
    limit: int,
    min_score: float,
) -> list[SavedRecommendation]:
    # rows arrive best first from the data layer
    if limit <= 0:
        return []
    return [r for r in recommendations if r.match_score >= min_score][:limit]


def mark_viewed(client: Client, recommendation_id: str) -> bool:
    return db.mark_recommendation_viewed(client, recommendation_id)


def dismiss(client: Client, recommendation_id: str) -> bool:
    return db.dismiss_recommendation(client, recommendation_id)
