"""Tests for __main__.py CLI commands."""

from unittest.mock import patch

import pytest

from clipshelf.__main__ import clear_history, main, print_history, print_snippets, run_command
from clipshelf.engine import ClipboardDataManager
from clipshelf.models import PRESET_CATEGORIES
from clipshelf.storage import StorageManager


class TestPrintHistory:
    def test_empty(self, manager, capsys):
        assert print_history(manager) == 0
        assert "(No clipboard history)" in capsys.readouterr().out

    def test_lists_recent_with_category(self, manager, capsys):
        first = manager.add_to_history("first")
        manager.add_to_history("second")
        manager.change_item_category(first, PRESET_CATEGORIES[1].id)

        print_history(manager)

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["  1. [General] second", "  2. [Work] first"]

    def test_limit(self, manager, capsys):
        for i in range(5):
            manager.add_to_history(f"item {i}")
        print_history(manager, limit=2)
        assert len(capsys.readouterr().out.splitlines()) == 2


class TestPrintSnippets:
    def test_empty(self, manager, capsys):
        print_snippets(manager)
        assert "(No snippets)" in capsys.readouterr().out

    def test_grouped_output(self, manager, capsys):
        work = manager.add_favorite_folder("Work", "#123456")
        manager.add_favorite_folder("Empty", "#000000")
        manager.add_snippet("standup notes", folder_id=work.id, description="daily")
        manager.add_snippet("loose one")

        print_snippets(manager)

        out = capsys.readouterr().out
        assert out.splitlines() == [
            "Work:",
            "  - standup notes  (daily)",
            "Unfiled:",
            "  - loose one",
        ]


class TestClearHistory:
    def test_clears_and_reports(self, manager, capsys):
        manager.add_to_history("a")
        manager.add_to_history("b")
        assert clear_history(manager) == 0
        assert manager.history_items == []
        assert "Cleared 2 history item(s)." in capsys.readouterr().out


class TestRunCommand:
    def test_clear_persists(self, tmp_path, capsys):
        db_path = tmp_path / "clipshelf.db"
        with StorageManager(db_path) as storage:
            ClipboardDataManager(storage).add_to_history("remove me")

        with patch("clipshelf.__main__.DB_PATH", db_path), patch("clipshelf.__main__.ensure_dirs"):
            assert run_command("clear") == 0

        with StorageManager(db_path) as storage:
            assert ClipboardDataManager(storage).history_items == []

    def test_history_command(self, tmp_path, capsys):
        db_path = tmp_path / "clipshelf.db"
        with StorageManager(db_path) as storage:
            ClipboardDataManager(storage).add_to_history("visible")

        with patch("clipshelf.__main__.DB_PATH", db_path), patch("clipshelf.__main__.ensure_dirs"):
            assert run_command("history") == 0

        assert "visible" in capsys.readouterr().out


class TestMain:
    @patch("clipshelf.__main__.run_app")
    def test_no_command_runs_app(self, mock_run_app):
        with patch("sys.argv", ["clipshelf"]):
            main()
        mock_run_app.assert_called_once()

    @patch("clipshelf.__main__.run_command", return_value=0)
    def test_command_exits_with_status(self, mock_run_command):
        with patch("sys.argv", ["clipshelf", "snippets"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 0
        mock_run_command.assert_called_once_with("snippets")

    def test_invalid_command(self):
        with patch("sys.argv", ["clipshelf", "bogus"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 2
