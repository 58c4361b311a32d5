#!/usr/bin/env python3
"""Check the Supabase tables jobmatch reads and writes.

Verifies that the required tables exist and prints the schema for the
recommendations table if it still needs to be created via the Supabase
SQL Editor.  Candidate, job and application tables belong to the job
board itself and are only checked, never created here.

Usage:
    python setup_db.py
"""

import os
import sys

from dotenv import load_dotenv
from supabase import create_client

load_dotenv()

# The SQL to run in Supabase SQL Editor if the table doesn't exist yet.
SETUP_SQL = """\
-- ── job_recommendations ──────────────────────────────────────────────
CREATE TABLE IF NOT EXISTS job_recommendations (
    id                      UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    user_id                 UUID NOT NULL REFERENCES auth.users(id) ON DELETE CASCADE,
    job_id                  UUID NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    match_score             NUMERIC(5, 2) NOT NULL,
    skills_match_score      NUMERIC(5, 2),
    experience_match_score  NUMERIC(5, 2),
    location_match_score    NUMERIC(5, 2),
    salary_match_score      NUMERIC(5, 2),
    match_details           JSONB,
    viewed                  BOOLEAN NOT NULL DEFAULT FALSE,
    viewed_at               TIMESTAMPTZ,
    dismissed               BOOLEAN NOT NULL DEFAULT FALSE,
    dismissed_at            TIMESTAMPTZ,
    created_at              TIMESTAMPTZ NOT NULL DEFAULT now(),
    expires_at              TIMESTAMPTZ NOT NULL DEFAULT now() + INTERVAL '7 days',
    UNIQUE (user_id, job_id)
);
CREATE INDEX IF NOT EXISTS idx_job_recommendations_user_score
    ON job_recommendations (user_id, match_score DESC);
"""

# Owned by the job board; jobmatch only reads them.
BOARD_TABLES = [
    "candidate_profiles",
    "candidate_skills",
    "candidate_preferences",
    "jobs",
    "job_applications",
]
REQUIRED_TABLES = [*BOARD_TABLES, "job_recommendations"]


def missing_tables(client) -> list[str]:
    """Return the required tables that cannot be queried."""
    missing = []
    for table in REQUIRED_TABLES:
        try:
            client.table(table).select("*").limit(1).execute()
            print(f"  ✓ {table}")
        except Exception as e:
            print(f"  ✗ {table}  — {e}")
            missing.append(table)
    return missing


def main() -> int:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")

    if not url or not key:
        print("ERROR: Set SUPABASE_URL and SUPABASE_KEY environment variables.")
        return 1

    client = create_client(url, key)

    print("Checking Supabase tables …\n")
    missing = missing_tables(client)

    if not missing:
        print("\nAll tables exist. You're good to go!")
        return 0

    board_missing = [t for t in missing if t in BOARD_TABLES]
    if board_missing:
        print(f"\nJob board tables missing: {', '.join(board_missing)}")
        print("These are created by the job board migrations, not by jobmatch.")

    if "job_recommendations" in missing:
        print("\n" + "=" * 60)
        print("Run the following SQL in the Supabase SQL Editor")
        print("(https://supabase.com/dashboard):\n")
        print(SETUP_SQL)
        print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(main())
