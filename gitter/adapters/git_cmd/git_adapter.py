"""Git adapter implementing the VCS protocols using subprocess git commands."""

import logging
import subprocess
import tempfile
from collections.abc import Iterator
from pathlib import Path

from gitter.adapters.errors import GitCommandError
from gitter.core.status.status_parser import get_status_parser
from gitter.domain.entities import StatusResult
from gitter.ports.vcs import CommitRef

logger = logging.getLogger(__name__)

# One commit per line: sha, tree sha and subject separated by NUL
_LOG_FORMAT = "--format=%H%x00%T%x00%s"


class RunnerGitRepo:
    """Repository backed by the git executable.

    Implements both the Gitter and RepositoryAccessor protocols.

    Args:
        working_dir: Repository directory (the work tree, or the repository
            itself when bare).
        status_format: "z" to read ``git status --porcelain -z`` or
            "porcelain" for the quoted newline-delimited form.
    """

    def __init__(self, working_dir: Path | str, status_format: str = "z") -> None:
        self._working_dir = Path(working_dir).resolve()
        self._status_format = status_format
        self._parse_status = get_status_parser(status_format)

    @property
    def working_dir(self) -> Path:
        return self._working_dir

    @property
    def status_format(self) -> str:
        return self._status_format

    def is_repository(self) -> bool:
        """Check if the working directory is inside a git repository."""
        if not self._working_dir.is_dir():
            return False
        try:
            self._run_git(["rev-parse", "--git-dir"], check=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def _run_git(
        self,
        args: list[str],
        check: bool = True,
        capture_output: bool = True,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run a git command in the repository.

        Args:
            args: Git command arguments (without 'git' prefix).
            check: Whether to raise CalledProcessError on non-zero exit.
            capture_output: Whether to capture stdout/stderr.

        Returns:
            CompletedProcess with command results.

        Raises:
            subprocess.CalledProcessError: If check=True and command fails.
        """
        cmd = ["git", "-C", str(self._working_dir)] + args
        logger.debug("Running %s", " ".join(cmd))
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            check=check,
        )
        if result.stdout:
            logger.debug("git %s output: %r", args[0], result.stdout)
        return result

    def _format_git_error(
        self,
        error: subprocess.CalledProcessError,
        context: str,
    ) -> str:
        """Format git error with full context.

        Args:
            error: The CalledProcessError from git command.
            context: Human-readable description of what was being done.

        Returns:
            Formatted error message with exit code and stderr.
        """
        stderr = error.stderr.decode("utf-8", errors="replace").strip() if error.stderr else ""

        msg = f"{context} (git exit code {error.returncode})"
        if stderr:
            msg += f": {stderr}"
        else:
            msg += " (no error output from git)"

        return msg

    def _run_or_raise(self, args: list[str], context: str) -> subprocess.CompletedProcess[bytes]:
        try:
            return self._run_git(args)
        except subprocess.CalledProcessError as e:
            raise GitCommandError(self._format_git_error(e, context)) from e
        except FileNotFoundError as e:
            raise GitCommandError(f"{context}: git executable not found") from e

    def init(self, bare: bool = False) -> None:
        """Create a repository with ``git init``.

        Args:
            bare: Create a bare repository.

        Raises:
            GitCommandError: If git init fails.
        """
        self._working_dir.mkdir(parents=True, exist_ok=True)
        args = ["init"]
        if bare:
            args.append("--bare")
        self._run_or_raise(args, f"Failed to init repository at {self._working_dir}")

    def add(self, paths: list[str]) -> None:
        """Stage paths with ``git add``.

        Raises:
            ValueError: If paths is empty.
            GitCommandError: If git add fails.
        """
        if not paths:
            raise ValueError("add requires at least one path")
        self._run_or_raise(["add", "--", *[str(p) for p in paths]], "Failed to add paths")

    def commit(self, message: str, all: bool = False) -> None:
        """Record a commit with ``git commit``.

        Args:
            message: Commit message.
            all: Stage modified and deleted tracked files first.

        Raises:
            GitCommandError: If git commit fails (including nothing to commit).
        """
        args = ["commit"]
        if all:
            args.append("--all")
        args += ["-m", message]
        self._run_or_raise(args, "Commit failed")

    def status(self) -> StatusResult:
        """Report changes using ``git status --porcelain``.

        Raises:
            GitCommandError: If git status fails.
        """
        args = ["status", "--porcelain"]
        if self._status_format == "z":
            args.append("-z")
        result = self._run_or_raise(args, "Failed to get status")
        return self._parse_status(result.stdout)

    def _has_commits(self) -> bool:
        result = self._run_git(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def commit_history(self) -> Iterator[CommitRef]:
        """Iterate commits reachable from HEAD, newest first.

        Commits are streamed from ``git log``; the process is killed if the
        consumer stops early. A repository without commits yields nothing.

        Raises:
            GitCommandError: If the history cannot be read.
        """
        try:
            has_commits = self._has_commits()
        except FileNotFoundError as e:
            raise GitCommandError("Failed to read commit history: git executable not found") from e
        if not has_commits:
            logger.debug("No commits in %s", self._working_dir)
            return

        cmd = ["git", "-C", str(self._working_dir), "log", _LOG_FORMAT, "HEAD"]
        # stderr goes to a file so git never blocks on an unread pipe
        with tempfile.TemporaryFile() as stderr_file:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=stderr_file)
            completed = False
            try:
                assert process.stdout is not None
                for line in process.stdout:
                    fields = line.decode("utf-8", errors="replace").rstrip("\n").split("\0")
                    # Pad in case git emitted fewer fields than requested
                    sha, tree_sha, message = (fields + ["", ""])[:3]
                    yield CommitRef(sha=sha, tree_sha=tree_sha or None, message=message)
                completed = True
            finally:
                if not completed:
                    process.kill()
                process.communicate()

            if process.returncode != 0:
                stderr_file.seek(0)
                error = subprocess.CalledProcessError(
                    process.returncode, cmd, stderr=stderr_file.read()
                )
                raise GitCommandError(
                    self._format_git_error(error, "Failed to read commit history")
                )

    def _commit_exists(self, sha: str) -> bool:
        result = self._run_git(["cat-file", "-e", f"{sha}^{{commit}}"], check=False)
        return result.returncode == 0

    def file_content_at(self, commit: CommitRef, path: str) -> bytes:
        """Get file content as of a commit's tree.

        Args:
            commit: Commit whose tree is read.
            path: Path relative to repository root.

        Returns:
            File content as bytes.

        Raises:
            FileNotFoundError: If the path is missing or not a file at the commit.
            GitCommandError: If the commit cannot be resolved.
        """
        try:
            # cat-file blob refuses trees, unlike git show
            result = self._run_git(["cat-file", "blob", f"{commit.sha}:{path}"])
            return result.stdout
        except FileNotFoundError as e:
            raise GitCommandError(
                f"Failed to get content for '{path}': git executable not found"
            ) from e
        except subprocess.CalledProcessError as e:
            if not self._commit_exists(commit.sha):
                error_msg = self._format_git_error(
                    e, f"Cannot retrieve tree for commit '{commit.sha}'"
                )
                raise GitCommandError(error_msg) from e
            raise FileNotFoundError(
                f"'{path}' is not a file at commit '{commit.sha}'"
            ) from e
