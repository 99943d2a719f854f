"""Version use case for deriving a repository's build version."""

import logging
from dataclasses import dataclass

from gitter.core.versioning.find_version import FindVersionMode, find_version
from gitter.domain.entities import VersionErrorType
from gitter.domain.exceptions import (
    GitterDomainError,
    UnsupportedModeError,
    VersionRetrievalError,
)
from gitter.ports.vcs import RepositoryAccessor

logger = logging.getLogger(__name__)


@dataclass
class VersionRequest:
    """Request to derive a version.

    Attributes:
        mode: Marker file convention.
        marker_file: Marker file override, or None for the convention's file.
    """

    mode: FindVersionMode | str = FindVersionMode.VERSION_TXT
    marker_file: str | None = None


@dataclass
class VersionResponse:
    """Response containing the derived version.

    Attributes:
        version: Derived version string, or None on failure.
        success: Whether derivation succeeded.
        error: Error message if derivation failed.
        error_type: Classification of the failure.
        hint: Optional actionable suggestion for the failure.
    """

    version: str | None = None
    success: bool = True
    error: str | None = None
    error_type: VersionErrorType = VersionErrorType.NONE
    hint: str | None = None

    @classmethod
    def create_error(
        cls,
        message: str,
        error_type: VersionErrorType,
        hint: str | None = None,
    ) -> "VersionResponse":
        return cls(success=False, error=message, error_type=error_type, hint=hint)


def classify_version_error(error: Exception) -> VersionErrorType:
    """Classify a derivation failure.

    Args:
        error: The exception raised while deriving.

    Returns:
        VersionErrorType for the failure.
    """
    if isinstance(error, UnsupportedModeError):
        return VersionErrorType.UNSUPPORTED_MODE
    if isinstance(error, VersionRetrievalError):
        return VersionErrorType.RETRIEVAL_ERROR
    if isinstance(error, RuntimeError):
        return VersionErrorType.GIT_ERROR
    return VersionErrorType.UNKNOWN


def format_version_error(error: Exception) -> str:
    """Turn a derivation failure into a message for the user.

    Domain errors already describe the marker file problem; git failures
    carry the operation and git's own output.
    """
    if isinstance(error, GitterDomainError):
        return error.message
    if isinstance(error, RuntimeError):
        return f"Git error while reading history: {error}"
    if isinstance(error, OSError):
        return f"Cannot access repository: {error}. Check that git is installed."
    return "Internal error while deriving the version. Run with --verbose for details."


def _log_version_error(error: Exception) -> None:
    if isinstance(error, (GitterDomainError, RuntimeError, OSError)):
        logger.error("Version derivation failed: %s", error)
    else:
        logger.exception("Unexpected error while deriving the version")


class VersionService:
    """Derives versions for one repository.

    Args:
        accessor: Repository history reader.
    """

    def __init__(self, accessor: RepositoryAccessor) -> None:
        self._accessor = accessor

    def execute(self, request: VersionRequest) -> VersionResponse:
        """Derive the version described by the request.

        Args:
            request: Mode and marker file to use.

        Returns:
            VersionResponse with the version or a classified error.
        """
        try:
            version = find_version(self._accessor, request.mode, request.marker_file)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            _log_version_error(e)
            return VersionResponse.create_error(
                format_version_error(e),
                classify_version_error(e),
                hint=getattr(e, "hint", None),
            )

        logger.debug("Derived version %s", version)
        return VersionResponse(version=version)
