"""Tests for setup_db.py — table existence check."""

from unittest.mock import MagicMock, patch

from setup_db import BOARD_TABLES, REQUIRED_TABLES, main, missing_tables


class TestMissingTables:
    def test_all_present(self):
        client = MagicMock()
        assert missing_tables(client) == []
        assert client.table.call_count == len(REQUIRED_TABLES)

    def test_reports_failing_tables(self):
        client = MagicMock()

        def _table(name):
            table = MagicMock()
            if name == "job_recommendations":
                table.select.return_value.limit.return_value.execute.side_effect = RuntimeError("relation missing")
            return table

        client.table.side_effect = _table
        assert missing_tables(client) == ["job_recommendations"]

    def test_recommendations_table_is_ours(self):
        assert "job_recommendations" not in BOARD_TABLES


class TestMain:
    def test_requires_env(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_KEY", raising=False)
        assert main() == 1

    @patch("setup_db.create_client")
    def test_prints_sql_when_missing(self, mock_create, monkeypatch, capsys):
        monkeypatch.setenv("SUPABASE_URL", "https://x.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "anon")
        tables = {}

        def _table(name):
            table = tables.setdefault(name, MagicMock())
            if name == "job_recommendations":
                table.select.return_value.limit.return_value.execute.side_effect = RuntimeError("nope")
            return table

        mock_create.return_value.table.side_effect = _table

        assert main() == 1
        assert "CREATE TABLE IF NOT EXISTS job_recommendations" in capsys.readouterr().out
