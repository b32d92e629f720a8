"""
Top-level pytest conftest.py -- shared fixtures for the unit tests.

Provides:
    sink          - recording LogSink
    isolated_env  - (autouse) strips ACTIVE_BRANCHES_* settings from the environment
    git_workspace - temporary directory that looks like a git working tree
"""

import os

import pytest

from tests.mocks import RecordingSink


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep developer environment settings out of the tests."""
    for key in list(os.environ):
        if key.startswith("ACTIVE_BRANCHES_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sink():
    """Recording sink for asserting on log output."""
    return RecordingSink()


@pytest.fixture
def git_workspace(tmp_path):
    """A directory with git metadata, standing in for a job workspace."""
    workspace = tmp_path / "workspace"
    (workspace / ".git").mkdir(parents=True)
    return workspace
