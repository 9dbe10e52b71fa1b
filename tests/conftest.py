"""Shared fixtures."""

import logging

import pytest

from constants import Constants
from flake_ref.family import register_variant, unregister_variant
from stub_refs import GitHubRef


@pytest.fixture
def github_variant():
    """Register the stub github variant for the duration of a test."""
    register_variant(GitHubRef)
    yield GitHubRef
    unregister_variant(GitHubRef)


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo config/CLI overrides applied onto Constants during a test."""
    saved = (Constants.PARSER_UTIL_BIN_PATH, Constants.RESOLVE_TIMEOUT)
    yield
    Constants.PARSER_UTIL_BIN_PATH, Constants.RESOLVE_TIMEOUT = saved


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers the CLI installs on the root logger."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
