"""Unit tests for active_branches.validate.

Tests cover:
- validate_repository_url: required, accepted prefixes, soft warning
- validate_max_count: required, numeric, positive, large-count warning
- validate_pattern: blank, valid and malformed regexes
"""

from __future__ import annotations

from active_branches import validate


class TestRepositoryUrlValidation:
    """Tests for validate_repository_url()."""

    def test_missing_url_rejected(self):
        for url in [None, "", "   "]:
            valid, msg = validate.validate_repository_url(url)
            assert valid is False
            assert msg == "Repository URL is required"

    def test_known_prefixes_accepted(self):
        for url in [
            "https://github.com/org/repo.git",
            "http://git.internal/repo",
            "git@github.com:org/repo.git",
            "ssh://git@host:2222/repo.git",
        ]:
            assert validate.validate_repository_url(url) == (True, "")

    def test_unknown_prefix_is_warning(self):
        valid, msg = validate.validate_repository_url("file:///srv/repo.git")
        assert valid is True
        assert msg == "URL should start with http://, https://, git@ or ssh://"

    def test_surrounding_whitespace_ignored(self):
        assert validate.validate_repository_url("  https://host/repo  ") == (True, "")


class TestMaxCountValidation:
    """Tests for validate_max_count()."""

    def test_missing_rejected(self):
        for value in [None, "", "  "]:
            assert validate.validate_max_count(value) == (False, "Max branch count is required")

    def test_non_numeric_rejected(self):
        assert validate.validate_max_count("ten") == (False, "Please enter a valid number")

    def test_non_positive_rejected(self):
        for value in ["0", "-3", 0]:
            valid, msg = validate.validate_max_count(value)
            assert valid is False
            assert msg == "Max branch count must be greater than 0"

    def test_normal_counts_accepted(self):
        for value in ["1", "10", " 25 ", 100]:
            assert validate.validate_max_count(value) == (True, "")

    def test_large_count_is_warning(self):
        valid, msg = validate.validate_max_count("101")
        assert valid is True
        assert msg == "Large branch counts may cause performance issues"


class TestPatternValidation:
    """Tests for validate_pattern()."""

    def test_blank_pattern_is_valid(self):
        for pattern in [None, "", "  "]:
            assert validate.validate_pattern(pattern) == (True, "")

    def test_valid_pattern_accepted(self):
        assert validate.validate_pattern("feature/.*|main") == (True, "")

    def test_malformed_pattern_rejected(self):
        valid, msg = validate.validate_pattern("feature/[")
        assert valid is False
        assert msg.startswith("Invalid regex pattern: ")
