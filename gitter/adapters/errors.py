"""Errors raised by the repository adapters."""


class GitCommandError(RuntimeError):
    """A git operation failed in the backend.

    The message names the operation that failed and, for the runner
    backend, git's exit code and stderr.
    """

    pass
