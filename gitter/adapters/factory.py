"""Factory classes for adapter instantiation.

Keeps the CLI layer free from direct adapter imports. The GitPython
backend is imported lazily so the runner backend works without loading it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitter.adapters.config.toml_config_provider import TomlConfigProvider
    from gitter.adapters.git_cmd.git_adapter import RunnerGitRepo
    from gitter.adapters.gitpython.gitpython_adapter import GitPythonRepo
    from gitter.domain.config import GitterConfig


class GitterFactory:
    """Factory for repository backends.

    Args:
        config: GitterConfig selecting the backend.
    """

    def __init__(self, config: GitterConfig) -> None:
        self._config = config

    def create(self, working_dir: Path) -> RunnerGitRepo | GitPythonRepo:
        """Create the configured backend for a directory.

        The returned object implements both Gitter and RepositoryAccessor.

        Raises:
            ValueError: If the backend name is not recognized.
        """
        backend = self._config.repo.backend
        if backend == "runner":
            from gitter.adapters.git_cmd.git_adapter import RunnerGitRepo

            return RunnerGitRepo(working_dir, status_format=self._config.repo.status_format)
        if backend == "gitpython":
            from gitter.adapters.gitpython.gitpython_adapter import GitPythonRepo

            return GitPythonRepo(working_dir)
        raise ValueError(f"Unknown backend: {backend}")


class ConfigFactory:
    """Factory for configuration providers."""

    def create_config_provider(self) -> TomlConfigProvider:
        from gitter.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()
