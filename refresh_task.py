#!/usr/bin/env python3
"""jobmatch recommendation refresh — designed to run as a scheduled job.

Pipeline:
  1. Purge stored recommendations past their expiry.
  2. Load every candidate that has a profile.
  3. For each candidate: score active jobs, upsert the best matches.

Required env vars:
    SUPABASE_URL                        — Supabase project URL
    SUPABASE_SERVICE_KEY                — Supabase service-role key
Optional:
    LOG_LEVEL                           — default INFO
"""

import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from jobmatch.db import (  # noqa: E402
    DataUnavailableError,
    get_candidate_user_ids,
    purge_expired_recommendations,
)
from jobmatch.db import (  # noqa: E402
    get_admin_client as get_db,
)
from jobmatch.recommender import refresh_recommendations  # noqa: E402

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s  %(levelname)-8s  %(message)s",
)
log = logging.getLogger("refresh_task")


def main() -> int:
    db = get_db()

    # ── 1. Purge expired recommendations ─────────────────────────────────
    purged_count = purge_expired_recommendations(db)
    if purged_count:
        log.info("Purged %d expired recommendation rows", purged_count)

    # ── 2. Load candidates ───────────────────────────────────────────────
    user_ids = get_candidate_user_ids(db)
    if not user_ids:
        log.info("No candidate profiles — nothing to do.")
        return 0
    log.info("Refreshing recommendations for %d candidates", len(user_ids))

    # ── 3. Per-candidate: score, save ────────────────────────────────────
    refreshed = 0
    failed = 0
    for user_id in user_ids:
        try:
            matches = refresh_recommendations(db, user_id)
        except DataUnavailableError:
            log.exception("  user=%s — failed to refresh, continuing", user_id)
            failed += 1
            continue

        if not matches:
            log.info("  user=%s — no matches above threshold", user_id)
            continue
        log.info("  user=%s — saved %d recommendations", user_id, len(matches))
        refreshed += 1

    log.info("Refresh complete: %d updated, %d failed.", refreshed, failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
