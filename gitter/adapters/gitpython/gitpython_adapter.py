"""GitPython adapter implementing the VCS protocols in-process.

Status is computed from the index and work tree diffs GitPython exposes
instead of parsing ``git status`` output, so results follow the same
StatusResult model as the runner backend. Untracked directories are
reported file by file rather than as a single ``dir/`` entry.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from git import Actor, Repo
from git.exc import (
    BadName,
    BadObject,
    InvalidGitRepositoryError,
    NoSuchPathError,
)
from git.exc import GitCommandError as LibGitCommandError

from gitter.adapters.errors import GitCommandError
from gitter.domain.entities import StatusCode, StatusEntry, StatusResult
from gitter.ports.vcs import CommitRef

logger = logging.getLogger(__name__)

# GitPython Diff.change_type -> status code
_CHANGE_TYPE_MAP: dict[str, StatusCode] = {
    "A": StatusCode.ADDED,
    "C": StatusCode.COPIED,
    "D": StatusCode.DELETED,
    "M": StatusCode.MODIFIED,
    "R": StatusCode.RENAMED,
    "T": StatusCode.MODIFIED,  # Type change (e.g., file -> symlink)
}


class GitPythonRepo:
    """Repository backed by the GitPython library.

    Implements both the Gitter and RepositoryAccessor protocols. The
    underlying ``git.Repo`` is opened lazily on first use.

    Args:
        working_dir: Repository directory.
    """

    def __init__(self, working_dir: Path | str) -> None:
        self._working_dir = Path(working_dir).resolve()
        self._repo: Repo | None = None

    @property
    def working_dir(self) -> Path:
        return self._working_dir

    def repository(self) -> Repo:
        """Open (once) and return the GitPython repository.

        Raises:
            GitCommandError: If the directory is not a git repository.
        """
        if self._repo is None:
            try:
                self._repo = Repo(self._working_dir)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise GitCommandError(f"Not a git repository: {self._working_dir}") from e
        return self._repo

    def is_repository(self) -> bool:
        """Check if the working directory is a git repository."""
        try:
            self.repository()
            return True
        except GitCommandError:
            return False

    def init(self, bare: bool = False) -> None:
        """Create a repository with ``Repo.init``."""
        try:
            self._repo = Repo.init(self._working_dir, bare=bare, mkdir=True)
        except (OSError, LibGitCommandError) as e:
            raise GitCommandError(
                f"Failed to init repository at {self._working_dir}: {e}"
            ) from e

    def _relative(self, path: str) -> str:
        if os.path.isabs(path):
            return os.path.relpath(path, self._working_dir)
        return path

    def add(self, paths: list[str]) -> None:
        """Stage paths in the index.

        Raises:
            ValueError: If paths is empty.
            GitCommandError: If a path cannot be staged.
        """
        if not paths:
            raise ValueError("add requires at least one path")
        repo = self.repository()
        try:
            repo.index.add([self._relative(str(p)) for p in paths])
            repo.index.write()
        except (OSError, LibGitCommandError) as e:
            raise GitCommandError(f"Failed to add paths: {e}") from e

    def author(self) -> Actor | None:
        """Read the commit author from the repository's user config."""
        reader = self.repository().config_reader()
        name = reader.get_value("user", "name", "")
        email = reader.get_value("user", "email", "")
        if not name and not email:
            # Let GitPython fall back to its environment defaults
            return None
        return Actor(str(name), str(email))

    def _stage_tracked_changes(self, repo: Repo) -> None:
        for diff in repo.index.diff(None):
            if diff.deleted_file:
                repo.index.remove([diff.a_path])
            else:
                repo.index.add([diff.a_path])

    def commit(self, message: str, all: bool = False) -> None:
        """Record the index as a new commit.

        Args:
            message: Commit message.
            all: Stage modified and deleted tracked files first.

        Raises:
            GitCommandError: If the commit cannot be written.
        """
        repo = self.repository()
        try:
            if all:
                self._stage_tracked_changes(repo)
            author = self.author()
            commit = repo.index.commit(message, author=author, committer=author)
        except (OSError, ValueError, LibGitCommandError) as e:
            raise GitCommandError(f"commit failed: {e}") from e
        logger.debug("Committed %s", commit.hexsha)

    def status(self) -> StatusResult:
        """Compute status from the index, HEAD and work tree.

        Raises:
            GitCommandError: If the repository cannot be read.
        """
        repo = self.repository()
        status = StatusResult()
        try:
            if repo.head.is_valid():
                # R=True makes HEAD the "a" side and the index the "b" side
                for diff in repo.index.diff("HEAD", R=True):
                    self._record(status, diff, staged=True)
            else:
                for path, _stage in repo.index.entries:
                    status[path] = StatusEntry(path=path, staging=StatusCode.ADDED)

            for diff in repo.index.diff(None):
                self._record(status, diff, staged=False)

            for path in repo.untracked_files:
                status[path] = StatusEntry(
                    path=path,
                    staging=StatusCode.UNTRACKED,
                    worktree=StatusCode.UNTRACKED,
                )
        except (OSError, LibGitCommandError) as e:
            raise GitCommandError(f"Failed to get status: {e}") from e
        return status

    def _record(self, status: StatusResult, diff, staged: bool) -> None:
        code = _CHANGE_TYPE_MAP.get(diff.change_type, StatusCode.MODIFIED)
        path = diff.b_path or diff.a_path
        entry = status.get(path)
        if entry is None:
            entry = StatusEntry(path=path)
            status[path] = entry
        if staged:
            entry.staging = code
            if diff.renamed_file:
                entry.extra = diff.rename_from
        else:
            entry.worktree = code

    def commit_history(self) -> Iterator[CommitRef]:
        """Iterate commits reachable from HEAD, newest first.

        Raises:
            GitCommandError: If the history cannot be read.
        """
        repo = self.repository()
        if not repo.head.is_valid():
            logger.debug("No commits in %s", self._working_dir)
            return
        try:
            for commit in repo.iter_commits("HEAD"):
                yield CommitRef(
                    sha=commit.hexsha,
                    tree_sha=commit.tree.hexsha,
                    message=str(commit.summary),
                )
        except (ValueError, LibGitCommandError) as e:
            raise GitCommandError(f"Failed to read commit history: {e}") from e

    def file_content_at(self, commit: CommitRef, path: str) -> bytes:
        """Get file content as of a commit's tree.

        Raises:
            FileNotFoundError: If file doesn't exist at the commit.
            GitCommandError: If the commit cannot be resolved.
        """
        repo = self.repository()
        try:
            tree = repo.commit(commit.sha).tree
        except (BadName, BadObject, ValueError) as e:
            raise GitCommandError(f"cannot retrieve tree for {commit.sha}: {e}") from e

        try:
            blob = tree / path
        except KeyError as e:
            raise FileNotFoundError(f"File '{path}' not found at commit '{commit.sha}'") from e
        if blob.type != "blob":
            raise FileNotFoundError(f"'{path}' is not a file at commit '{commit.sha}'")
        return blob.data_stream.read()
