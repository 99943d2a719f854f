"""Domain entities and value objects.

Core domain models describing the state of a working copy as reported by
``git status``. These are pure Python dataclasses with no dependencies on
infrastructure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VersionErrorType(str, Enum):
    """Classification of version derivation failures.

    Lets callers tell a feature that is not built from a data problem.
    """

    NONE = "none"
    UNSUPPORTED_MODE = "unsupported_mode"
    RETRIEVAL_ERROR = "retrieval_error"  # Marker file missing or unreadable
    GIT_ERROR = "git_error"  # History could not be walked
    UNKNOWN = "unknown"


class StatusCode(str, Enum):
    """Single-character status code for one side of a status record.

    For paths without merge conflicts the first code describes the index
    (staging area) and the second the work tree. Untracked paths use ``?``
    on both sides.
    """

    UNMODIFIED = " "
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UPDATED_BUT_UNMERGED = "U"
    UNTRACKED = "?"

    @classmethod
    def from_char(cls, char: str) -> StatusCode | str:
        """Map a status character to its code.

        Args:
            char: Status character as emitted by git.

        Returns:
            The matching StatusCode, or the raw character if git emitted a
            code outside the known set (e.g. ``!`` for ignored paths).
        """
        try:
            return cls(char)
        except ValueError:
            return char

    def __str__(self) -> str:
        return self.value


@dataclass
class StatusEntry:
    """Status of a single changed path.

    Attributes:
        path: Current path of the file, relative to the repository root.
        staging: Status of the path in the index.
        worktree: Status of the path in the work tree.
        extra: Origin path for renamed/copied entries, empty otherwise.
    """

    path: str
    staging: StatusCode | str = StatusCode.UNMODIFIED
    worktree: StatusCode | str = StatusCode.UNMODIFIED
    extra: str = ""

    @property
    def is_untracked(self) -> bool:
        return self.staging == StatusCode.UNTRACKED or self.worktree == StatusCode.UNTRACKED

    @property
    def is_rename_or_copy(self) -> bool:
        return any(
            code in (StatusCode.RENAMED, StatusCode.COPIED)
            for code in (self.staging, self.worktree)
        )

    def short_format(self) -> str:
        """Render this entry as a short-format status line.

        Renamed and copied entries follow git's ``ORIG_PATH -> PATH`` order.
        """
        codes = f"{self.staging}{self.worktree}"
        if self.extra:
            return f"{codes} {self.extra} -> {self.path}"
        return f"{codes} {self.path}"


class StatusResult(dict[str, StatusEntry]):
    """Mapping from path to StatusEntry for a single status invocation."""

    def file(self, path: str) -> StatusEntry:
        """Get the entry for a path, registering it as untracked if absent."""
        entry = self.get(path)
        if entry is None:
            entry = StatusEntry(
                path=path,
                staging=StatusCode.UNTRACKED,
                worktree=StatusCode.UNTRACKED,
            )
            self[path] = entry
        return entry

    def is_clean(self) -> bool:
        """Return True if the working copy has no changes."""
        return len(self) == 0

    def __str__(self) -> str:
        return "\n".join(self[path].short_format() for path in sorted(self))
