"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all gitter CLI commands.
"""

from pathlib import Path
from typing import NoReturn

import click


class GitterCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise GitterCliError(
            "Not a git repository",
            hint="Run 'gitter init' to create one"
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def not_a_repository_error(path: Path) -> NoReturn:
    """Raise error when the target directory is not a git repository.

    Raises:
        GitterCliError: Always raises with init hint.
    """
    raise GitterCliError(
        f"Not a git repository: {path}",
        hint="Run 'gitter init' or pass the repository with -C <dir>",
    )
