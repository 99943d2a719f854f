"""Version Control System (VCS) port interfaces.

Defines the abstract interfaces the status decoder and version deriver
rely on. Concrete implementations live in ``gitter.adapters``.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gitter.domain.entities import StatusResult


@dataclass(frozen=True)
class CommitRef:
    """Reference to a single commit.

    Attributes:
        sha: Commit SHA (40-char hex string).
        tree_sha: Tree SHA of the commit, if the backend knows it cheaply.
        message: Commit message summary, if the backend knows it cheaply.
    """

    sha: str
    tree_sha: str | None = None
    message: str = ""

    def __str__(self) -> str:
        return self.sha


class RepositoryAccessor(Protocol):
    """Read access to commit history, as needed by the version deriver."""

    def commit_history(self) -> Iterator[CommitRef]:
        """Iterate commits reachable from HEAD, newest first.

        The iterator is lazy: abandoning it early must not read the rest of
        the history. A repository without commits yields nothing.

        Raises:
            RuntimeError: If the history cannot be read.
        """
        ...

    def file_content_at(self, commit: CommitRef, path: str) -> bytes:
        """Get file content as of a commit's tree.

        Args:
            commit: Commit whose tree is read.
            path: Path relative to repository root, using ``/`` separators.

        Returns:
            File content as bytes.

        Raises:
            FileNotFoundError: If the file doesn't exist in the commit's tree.
            RuntimeError: If the commit or tree cannot be read.
        """
        ...


class Gitter(Protocol):
    """Protocol for the write-side and status operations of a repository."""

    @property
    def working_dir(self) -> Path:
        """Directory the repository lives in."""
        ...

    def init(self, bare: bool = False) -> None:
        """Create a new repository in the working directory."""
        ...

    def add(self, paths: list[str]) -> None:
        """Stage paths (absolute or relative to the working directory).

        Raises:
            ValueError: If no paths are given.
        """
        ...

    def commit(self, message: str, all: bool = False) -> None:
        """Record staged changes, staging tracked modifications first if ``all``."""
        ...

    def status(self) -> StatusResult:
        """Report changed paths in the index and work tree."""
        ...
