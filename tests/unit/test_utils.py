"""Unit tests for active_branches.utils logging helpers."""

from __future__ import annotations

import logging

from active_branches import utils


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("active_branches", level, __file__, 1, msg, None, None)


class TestBranchesFormatter:

    def test_level_prefixes(self):
        formatter = utils.BranchesFormatter()
        assert formatter.format(_record(logging.DEBUG, "d")) == "DEBUG: d"
        assert formatter.format(_record(logging.INFO, "i")) == "i"
        assert formatter.format(_record(logging.WARNING, "w")) == "Warning: w"
        assert formatter.format(_record(logging.ERROR, "e")) == "Error: e"


class TestLogHelpers:

    def test_debug_silent_by_default(self, capsys):
        utils.log_debug("hidden")
        assert capsys.readouterr().err == ""

    def test_debug_enabled_by_env(self, capsys, monkeypatch):
        monkeypatch.setenv("ACTIVE_BRANCHES_DEBUG", "1")
        utils.log_debug("shown")
        assert capsys.readouterr().err == "DEBUG: shown\n"

    def test_info_to_stdout(self, capsys):
        utils.log_info("hello")
        assert capsys.readouterr().out == "hello\n"

    def test_error_to_stderr(self, capsys):
        utils.log_error("boom")
        assert capsys.readouterr().err == "Error: boom\n"

    def test_warn_to_stderr(self, capsys):
        utils.log_warn("careful")
        assert "careful" in capsys.readouterr().err


class TestVerbosity:

    def test_levels(self, monkeypatch):
        logger = utils.get_logger()
        try:
            utils.configure_verbosity(True)
            assert logger.level == logging.INFO
            monkeypatch.setenv("ACTIVE_BRANCHES_DEBUG", "1")
            utils.configure_verbosity(False)
            assert logger.level == logging.DEBUG
        finally:
            monkeypatch.delenv("ACTIVE_BRANCHES_DEBUG", raising=False)
            utils.configure_verbosity(False)
        assert logger.level == logging.WARNING

    def test_debug_setting_parsed_as_number(self, monkeypatch, capsys):
        logger = utils.get_logger()
        monkeypatch.setenv("ACTIVE_BRANCHES_DEBUG", "2")
        try:
            utils.configure_verbosity(False)
            utils.log_debug("shown")
            assert logger.level == logging.DEBUG
            assert capsys.readouterr().err == "DEBUG: shown\n"
        finally:
            monkeypatch.delenv("ACTIVE_BRANCHES_DEBUG")
            utils.configure_verbosity(False)


class TestFormatBranchRow:

    def test_padded_name_column(self):
        row = utils.format_branch_row("main", "2024-01-01", name_width=8)
        assert row == "  main     2024-01-01"

    def test_trailing_space_stripped(self):
        assert utils.format_branch_row("main", "") == "  main"
