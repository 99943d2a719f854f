"""Version derivation from commit history."""

from gitter.core.versioning.find_version import (
    FindVersionMode,
    find_version,
    find_version_using,
)
from gitter.core.versioning.version_service import (
    VersionRequest,
    VersionResponse,
    VersionService,
)

__all__ = [
    "FindVersionMode",
    "VersionRequest",
    "VersionResponse",
    "VersionService",
    "find_version",
    "find_version_using",
]
