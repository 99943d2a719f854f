"""Unit tests for version derivation against an in-memory history."""

import pytest

from gitter.core.versioning.find_version import (
    DEFAULT_MARKER_FILE,
    FindVersionMode,
    find_version,
    find_version_using,
)
from gitter.domain.exceptions import UnsupportedModeError, VersionRetrievalError
from tests.helpers import InMemoryRepository


def make_repo(*versions: str) -> InMemoryRepository:
    """Build a history where each commit only carries version.txt."""
    return InMemoryRepository([{"version.txt": version} for version in versions])


class TestFindVersion:
    """Tests for find_version in version.txt mode."""

    def test_single_commit_has_depth_zero(self):
        assert find_version(make_repo("0.1")) == "0.1.0"

    def test_depth_counts_commits_with_same_base(self):
        assert find_version(make_repo("0.1", "0.1", "0.1")) == "0.1.2"

    def test_bump_resets_depth(self):
        assert find_version(make_repo("0.1", "0.1", "0.1", "0.2")) == "0.2.0"

    def test_depth_grows_after_bump(self):
        assert find_version(make_repo("0.1", "0.2", "0.2")) == "0.2.1"

    def test_unrelated_file_changes_still_count(self):
        """Test commits that only touch other files add to the depth."""
        repo = InMemoryRepository(
            [
                {"version.txt": "1.0"},
                {"version.txt": "1.0", "a.txt": "a"},
                {"version.txt": "1.0", "a.txt": "b"},
            ]
        )
        assert find_version(repo) == "1.0.2"

    def test_earlier_history_with_same_base_is_not_counted(self):
        """Test only the unbroken run from HEAD counts."""
        assert find_version(make_repo("0.1", "0.2", "0.1", "0.1")) == "0.1.1"

    def test_content_is_used_verbatim(self):
        """Test marker content is not trimmed."""
        assert find_version(make_repo("0.1\n")) == "0.1\n.0"

    def test_whitespace_difference_is_a_change(self):
        assert find_version(make_repo("0.1", "0.1\n")) == "0.1\n.0"

    def test_mode_accepts_string_value(self):
        assert find_version(make_repo("0.1", "0.1"), "version.txt") == "0.1.1"

    def test_stops_at_first_change(self):
        """Test the walk does not read past the first differing commit."""
        repo = make_repo("0.0", "0.0", "0.1", "0.2", "0.2")

        assert find_version(repo) == "0.2.1"
        assert len(repo.reads) == 3
        assert len(repo.yielded) == 3
        assert repo.history_calls == 1

    def test_reads_marker_file(self):
        repo = make_repo("0.1")
        find_version(repo)
        assert repo.reads == [("0" * 40, DEFAULT_MARKER_FILE)]

    def test_marker_file_override(self):
        repo = InMemoryRepository([{"VERSION": "3.1"}, {"VERSION": "3.1"}])
        assert find_version(repo, marker_file="VERSION") == "3.1.1"
        assert {path for _sha, path in repo.reads} == {"VERSION"}

    def test_missing_marker_at_head(self):
        repo = InMemoryRepository([{"README.md": "hi"}])

        with pytest.raises(VersionRetrievalError, match="version.txt"):
            find_version(repo)

    def test_missing_marker_in_older_commit(self):
        """Test a missing marker fails even when HEAD has one."""
        repo = InMemoryRepository([{"README.md": "hi"}, {"version.txt": "0.1"}])

        with pytest.raises(VersionRetrievalError) as exc_info:
            find_version(repo)

        assert exc_info.value.hint is not None
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_empty_history(self):
        with pytest.raises(VersionRetrievalError, match="no commits"):
            find_version(InMemoryRepository())

    def test_pom_mode_is_unsupported(self):
        repo = make_repo("0.1")

        with pytest.raises(UnsupportedModeError, match="pom.xml"):
            find_version(repo, FindVersionMode.POM_XML)

        # Rejected before touching the repository
        assert repo.history_calls == 0

    def test_unknown_mode_is_unsupported(self):
        repo = make_repo("0.1")

        with pytest.raises(UnsupportedModeError, match="unsupported mode"):
            find_version(repo, "setup.py")

        assert repo.history_calls == 0

    def test_unsupported_mode_is_distinct_from_retrieval_error(self):
        with pytest.raises(UnsupportedModeError) as exc_info:
            find_version(make_repo("0.1"), "pom.xml")

        assert not isinstance(exc_info.value, VersionRetrievalError)


class FailingHistory:
    """Accessor whose history walk fails."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def commit_history(self):
        raise self.error
        yield  # pragma: no cover

    def file_content_at(self, commit, path):  # pragma: no cover
        raise AssertionError("should not be called")


class TestFindVersionErrors:
    """Tests for error propagation from the accessor."""

    def test_history_error_propagates_unchanged(self):
        error = RuntimeError("cannot walk history")

        with pytest.raises(RuntimeError) as exc_info:
            find_version(FailingHistory(error))

        assert exc_info.value is error

    def test_tree_read_error_propagates_unchanged(self):
        """Test a failure to read a commit's tree is not a retrieval error."""
        error = RuntimeError("cannot retrieve tree")

        class BrokenTree(InMemoryRepository):
            def file_content_at(self, commit, path):
                raise error

        with pytest.raises(RuntimeError) as exc_info:
            find_version(BrokenTree([{"version.txt": "0.1"}]))

        assert exc_info.value is error
        assert not isinstance(exc_info.value, VersionRetrievalError)


class TestFindVersionUsing:
    """Tests for find_version_using with custom base parsers."""

    def test_custom_parser(self):
        repo = make_repo("1.0\n", "1.0 \n", "1.0")
        assert find_version_using(repo, str.strip) == "1.0.2"

    def test_parser_receives_decoded_text(self):
        seen = []

        def parser(content):
            seen.append(content)
            return "7"

        repo = InMemoryRepository([{"version.txt": "é".encode()}])
        assert find_version_using(repo, parser) == "7.0"
        assert seen == ["é"]

    def test_custom_marker_file(self):
        repo = InMemoryRepository([{"build/VERSION": "2"}])
        assert find_version_using(repo, lambda c: c, "build/VERSION") == "2.0"
