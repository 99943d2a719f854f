"""Test fixtures module."""

from tests.fixtures.repo_fixture import RepoFixture, configure_git_user

__all__ = ["RepoFixture", "configure_git_user"]
