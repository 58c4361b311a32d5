"""Tests for the scheduled recommendation refresh (refresh_task.py).

Tests the main() orchestrator by mocking the Supabase layer and the
recommendation flow.
"""

from unittest.mock import MagicMock, patch

import httpx

from jobmatch.db import DataUnavailableError

# ---------------------------------------------------------------------------
# Patch targets (all in the refresh_task module's namespace)
# ---------------------------------------------------------------------------

_PATCH_PREFIX = "refresh_task"


def _empty_result():
    result = MagicMock()
    result.data = []
    return result


class TestRefreshTaskPurge:
    @patch(f"{_PATCH_PREFIX}.refresh_recommendations")
    @patch(f"{_PATCH_PREFIX}.get_candidate_user_ids", return_value=[])
    @patch(f"{_PATCH_PREFIX}.purge_expired_recommendations", return_value=4)
    @patch(f"{_PATCH_PREFIX}.get_db", return_value=MagicMock())
    def test_purge_called_first(
        self,
        mock_db: MagicMock,
        mock_purge: MagicMock,
        _mock_users: MagicMock,
        mock_refresh: MagicMock,
    ) -> None:
        from refresh_task import main

        assert main() == 0
        mock_purge.assert_called_once_with(mock_db.return_value)
        mock_refresh.assert_not_called()


class TestRefreshTaskCandidates:
    @patch(f"{_PATCH_PREFIX}.refresh_recommendations")
    @patch(f"{_PATCH_PREFIX}.get_candidate_user_ids", return_value=["u1", "u2", "u3"])
    @patch(f"{_PATCH_PREFIX}.purge_expired_recommendations", return_value=0)
    @patch(f"{_PATCH_PREFIX}.get_db", return_value=MagicMock())
    def test_refreshes_every_candidate(
        self,
        mock_db: MagicMock,
        _mock_purge: MagicMock,
        _mock_users: MagicMock,
        mock_refresh: MagicMock,
    ) -> None:
        from refresh_task import main

        mock_refresh.side_effect = [[MagicMock()], [], [MagicMock(), MagicMock()]]

        assert main() == 0
        assert [c.args for c in mock_refresh.call_args_list] == [
            (mock_db.return_value, "u1"),
            (mock_db.return_value, "u2"),
            (mock_db.return_value, "u3"),
        ]

    @patch(f"{_PATCH_PREFIX}.refresh_recommendations")
    @patch(f"{_PATCH_PREFIX}.get_candidate_user_ids", return_value=["u1", "u2"])
    @patch(f"{_PATCH_PREFIX}.purge_expired_recommendations", return_value=0)
    @patch(f"{_PATCH_PREFIX}.get_db", return_value=MagicMock())
    def test_continues_after_data_error(
        self,
        _mock_db: MagicMock,
        _mock_purge: MagicMock,
        _mock_users: MagicMock,
        mock_refresh: MagicMock,
        caplog,
    ) -> None:
        from refresh_task import main

        mock_refresh.side_effect = [DataUnavailableError("Failed to load active jobs"), [MagicMock()]]

        assert main() == 0
        assert mock_refresh.call_count == 2
        assert "user=u1 — failed to refresh" in caplog.text

    @patch(f"{_PATCH_PREFIX}.get_candidate_user_ids", return_value=["u1", "u2"])
    @patch(f"{_PATCH_PREFIX}.purge_expired_recommendations", return_value=0)
    @patch(f"{_PATCH_PREFIX}.get_db")
    def test_continues_after_connection_error(
        self,
        mock_db: MagicMock,
        _mock_purge: MagicMock,
        _mock_users: MagicMock,
        caplog,
    ) -> None:
        """A network failure for one candidate surfaces through the data
        layer as DataUnavailableError and does not stop the batch."""
        from refresh_task import main

        client = MagicMock()
        mock_db.return_value = client
        client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.side_effect = [
            httpx.ConnectError("connection reset"),
            _empty_result(),
        ]

        assert main() == 0
        assert "user=u1 — failed to refresh" in caplog.text
        assert client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.call_count == 2
