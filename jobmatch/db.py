"""Supabase database layer for jobmatch."""

import os
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from .models import CandidateProfile, Job, JobMatchScore, SavedRecommendation

RECOMMENDATION_TTL_DAYS = 7

PROFILE_SELECT = """
    *,
    skills:candidate_skills(skill_name),
    preferences:candidate_preferences(*)
"""


class DataUnavailableError(RuntimeError):
    """A Supabase query failed; the caller decides whether to retry or skip."""


def get_client() -> Client:
    """Create a read-only Supabase client (anon / publishable key).

    Uses SUPABASE_URL + SUPABASE_KEY.
    """
    url = os.environ["SUPABASE_URL"]
    key = os.environ["SUPABASE_KEY"]
    return create_client(url, key)


def get_admin_client() -> Client:
    """Create a Supabase client with the service-role key (bypasses RLS).

    Uses SUPABASE_URL + SUPABASE_SERVICE_KEY.
    Required for all INSERT / UPDATE / UPSERT operations.
    """
    url = os.environ["SUPABASE_URL"]
    key = os.environ["SUPABASE_SERVICE_KEY"]
    return create_client(url, key)


def _execute(query, action: str) -> list[dict]:
    """Run a PostgREST query and return its rows.

    Raises:
        DataUnavailableError: If PostgREST rejects the request or the
            connection to Supabase fails.
    """
    try:
        result = query.execute()
    except APIError as e:
        raise DataUnavailableError(f"Failed to {action}: {e.message}") from e
    except httpx.HTTPError as e:
        raise DataUnavailableError(f"Failed to {action}: {e}") from e
    return result.data or []


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

def load_candidate_profile(client: Client, user_id: str) -> CandidateProfile | None:
    """Return the candidate's profile with skills and preferences, or None."""
    rows = _execute(
        client.table("candidate_profiles")
        .select(PROFILE_SELECT)
        .eq("user_id", user_id)
        .limit(1),
        f"load candidate profile for user={user_id}",
    )
    if not rows:
        return None
    return CandidateProfile.from_row(rows[0])


def get_candidate_user_ids(client: Client) -> list[str]:
    """Return the user id of every candidate that has a profile."""
    rows = _execute(
        client.table("candidate_profiles").select("user_id"),
        "list candidate profiles",
    )
    return [r["user_id"] for r in rows if r.get("user_id")]


def get_applied_job_ids(client: Client, user_id: str) -> set[str]:
    """Return ids of jobs this user has already applied to."""
    rows = _execute(
        client.table("job_applications")
        .select("job_id")
        .eq("user_id", user_id),
        f"load applications for user={user_id}",
    )
    return {r["job_id"] for r in rows}


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

def load_active_jobs(
    client: Client,
    exclude_ids: Iterable[str] = (),
    max_count: int = 100,
) -> list[Job]:
    """Return active jobs, newest first, skipping *exclude_ids*."""
    query = client.table("jobs").select("*").eq("status", "active")
    excluded = sorted(set(exclude_ids))
    if excluded:
        query = query.not_.in_("id", excluded)
    rows = _execute(
        query.order("created_at", desc=True).limit(max_count),
        "load active jobs",
    )
    return [Job(**r) for r in rows]


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

def save_recommendations(
    client: Client,
    user_id: str,
    matches: list[JobMatchScore],
    ttl_days: int = RECOMMENDATION_TTL_DAYS,
) -> list[dict]:
    """Upsert match scores keyed by (user_id, job_id).

    Existing rows for the same pair are overwritten, marked unviewed again,
    and their expiry is pushed *ttl_days* into the future.  Dismissals are
    left alone.  Returns the upserted rows.
    """
    if not matches:
        return []
    expires_at = (datetime.now(timezone.utc) + timedelta(days=ttl_days)).isoformat()
    rows = [
        {
            "user_id": user_id,
            "job_id": m.job_id,
            "match_score": m.match_score,
            "skills_match_score": m.skills_match_score,
            "experience_match_score": m.experience_match_score,
            "location_match_score": m.location_match_score,
            "salary_match_score": m.salary_match_score,
            "match_details": m.match_details.model_dump(),
            "viewed": False,
            "viewed_at": None,
            "expires_at": expires_at,
        }
        for m in matches
    ]
    return _execute(
        client.table("job_recommendations").upsert(rows, on_conflict="user_id,job_id"),
        f"save recommendations for user={user_id}",
    )


def get_saved_recommendations(
    client: Client,
    user_id: str,
    include_viewed: bool = False,
) -> list[SavedRecommendation]:
    """Return fresh, non-dismissed recommendations with their jobs attached.

    Ordered by match score, best first.  Viewed rows are skipped unless
    *include_viewed* is set.
    """
    query = (
        client.table("job_recommendations")
        .select("*, job:jobs(*)")
        .eq("user_id", user_id)
        .eq("dismissed", False)
        .gt("expires_at", _now_iso())
    )
    if not include_viewed:
        query = query.eq("viewed", False)
    rows = _execute(
        query.order("match_score", desc=True),
        f"load saved recommendations for user={user_id}",
    )
    return [SavedRecommendation(**r) for r in rows]


def mark_recommendation_viewed(client: Client, recommendation_id: str) -> bool:
    """Flag a recommendation as seen. Returns True if a row was updated."""
    rows = _execute(
        client.table("job_recommendations")
        .update({"viewed": True, "viewed_at": _now_iso()})
        .eq("id", recommendation_id),
        f"mark recommendation {recommendation_id} viewed",
    )
    return bool(rows)


def dismiss_recommendation(client: Client, recommendation_id: str) -> bool:
    """Hide a recommendation for good. Returns True if a row was updated."""
    rows = _execute(
        client.table("job_recommendations")
        .update({"dismissed": True, "dismissed_at": _now_iso()})
        .eq("id", recommendation_id),
        f"dismiss recommendation {recommendation_id}",
    )
    return bool(rows)


def purge_expired_recommendations(client: Client) -> int:
    """Delete recommendations whose expires_at has passed.

    Returns the number of deleted rows.
    """
    rows = _execute(
        client.table("job_recommendations")
        .delete()
        .lt("expires_at", _now_iso()),
        "purge expired recommendations",
    )
    return len(rows)
