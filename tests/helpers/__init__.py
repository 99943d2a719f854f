"""Test helper utilities for the gitter test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_output_contains,
)
from tests.helpers.fake_repository import InMemoryRepository

__all__ = [
    "InMemoryRepository",
    "assert_command_failed",
    "assert_command_success",
    "assert_output_contains",
]
