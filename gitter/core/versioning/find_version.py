"""Derive a build version from commit history.

The base version lives in a human-edited marker file (``version.txt`` by
default). Walking history from HEAD, every commit that still carries the
same base adds one to the depth; the walk stops at the first commit whose
marker differs. The result is ``<base>.<depth>``, so the last number grows
with every commit and resets to 0 on the commit that bumps the marker.
"""

import logging
from collections.abc import Callable
from enum import Enum

from gitter.domain.exceptions import UnsupportedModeError, VersionRetrievalError
from gitter.ports.vcs import RepositoryAccessor

logger = logging.getLogger(__name__)

DEFAULT_MARKER_FILE = "version.txt"

BaseParser = Callable[[str], str]


class FindVersionMode(str, Enum):
    """Marker file conventions for extracting the base version."""

    VERSION_TXT = "version.txt"
    POM_XML = "pom.xml"


def _version_txt_base(content: str) -> str:
    return content


def find_version_using(
    accessor: RepositoryAccessor,
    base_parser: BaseParser,
    marker_file: str = DEFAULT_MARKER_FILE,
) -> str:
    """Derive ``<base>.<depth>`` using a custom base parser.

    Args:
        accessor: Repository history reader.
        base_parser: Maps marker file content to the base version token.
        marker_file: Marker file path relative to the repository root.

    Returns:
        Version string, e.g. ``"0.1.2"``.

    Raises:
        VersionRetrievalError: If the repository has no commits, or the
            marker file is missing at a visited commit.
        RuntimeError: If the accessor cannot walk the history or read a
            commit's tree. Raised unchanged.
    """
    current: str | None = None
    depth = 0

    for commit in accessor.commit_history():
        try:
            raw = accessor.file_content_at(commit, marker_file)
        except FileNotFoundError as e:
            raise VersionRetrievalError(
                f"Unable to retrieve {marker_file} at commit {commit.sha}",
                hint=f"Every commit in the measured history must contain {marker_file}",
            ) from e

        base = base_parser(raw.decode("utf-8", errors="replace"))

        if current is None:
            current = base
            logger.debug("Base version %r at %s", base, commit.sha)
            continue

        if base != current:
            logger.debug("Version changed to %r at %s, stopping at depth %d", base, commit.sha, depth)
            break

        depth += 1

    if current is None:
        raise VersionRetrievalError(
            "Unable to derive a version: repository has no commits",
            hint=f"Commit {marker_file} first",
        )

    return f"{current}.{depth}"


def find_version(
    accessor: RepositoryAccessor,
    mode: FindVersionMode | str = FindVersionMode.VERSION_TXT,
    marker_file: str | None = None,
) -> str:
    """Derive the version using a built-in marker file convention.

    Args:
        accessor: Repository history reader.
        mode: Marker file convention.
        marker_file: Override for the marker file path. Defaults to the
            convention's file name.

    Returns:
        Version string, e.g. ``"0.2.0"``.

    Raises:
        UnsupportedModeError: If the mode is unknown or not implemented.
        VersionRetrievalError: If the marker file cannot be read.
    """
    try:
        mode = FindVersionMode(mode)
    except ValueError:
        raise UnsupportedModeError(
            f"unsupported mode {mode}",
            hint=f"Use one of: {', '.join(m.value for m in FindVersionMode)}",
        ) from None

    if mode is FindVersionMode.POM_XML:
        raise UnsupportedModeError(f"{mode.value} mode not yet implemented")

    return find_version_using(
        accessor,
        _version_txt_base,
        marker_file or mode.value,
    )
