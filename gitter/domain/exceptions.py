"""Domain exceptions for gitter business logic.

These exceptions represent failures of the status and version logic.
They should be caught at the application boundary (CLI) and converted
to appropriate user-facing error messages.
"""


class GitterDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class UnsupportedModeError(GitterDomainError):
    """Raised when a version lookup mode is declared but not implemented."""

    pass


class VersionRetrievalError(GitterDomainError):
    """Raised when the version marker file cannot be read at a visited commit."""

    pass
