"""Config domain models for gitter.

Configuration is stored in .gitter.toml (per repository) and
~/.config/gitter/config.toml (per user). This module defines the domain
models that represent validated configuration state.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Literal

BACKENDS = ("runner", "gitpython")
STATUS_FORMATS = ("z", "porcelain")
VERSION_MODES = ("version.txt", "pom.xml")


@dataclass(frozen=True)
class RepoConfig:
    """Configuration for the repository backend.

    Attributes:
        backend: "runner" spawns the git executable, "gitpython" uses the
                 embedded GitPython library.
        status_format: Status wire format read from the runner backend -
                       "z" (NUL-delimited) or "porcelain" (quoted, legacy).

    Raises:
        ValueError: If backend or status_format is not recognized.
    """

    backend: Literal["runner", "gitpython"] = "runner"
    status_format: Literal["z", "porcelain"] = "z"

    def __post_init__(self) -> None:
        """Validate repo config after initialization."""
        if self.backend not in BACKENDS:
            raise ValueError(
                f"backend must be one of {', '.join(BACKENDS)}, got {self.backend!r}"
            )
        if self.status_format not in STATUS_FORMATS:
            raise ValueError(
                f"status_format must be one of {', '.join(STATUS_FORMATS)}, "
                f"got {self.status_format!r}"
            )


@dataclass(frozen=True)
class VersionConfig:
    """Configuration for version derivation.

    Attributes:
        mode: Marker file convention used to extract the base version.
        marker_file: Path of the marker file relative to the repository root.
                     Empty means the mode's conventional file name.

    Raises:
        ValueError: If mode is unknown.
    """

    mode: str = "version.txt"
    marker_file: str = ""

    def __post_init__(self) -> None:
        """Validate version config after initialization."""
        if self.mode not in VERSION_MODES:
            raise ValueError(
                f"mode must be one of {', '.join(VERSION_MODES)}, got {self.mode!r}"
            )


@dataclass(frozen=True)
class GitterConfig:
    """Complete gitter configuration.

    Attributes:
        repo: Repository backend configuration
        version: Version derivation configuration
    """

    repo: RepoConfig = field(default_factory=RepoConfig)
    version: VersionConfig = field(default_factory=VersionConfig)

    @staticmethod
    def default() -> "GitterConfig":
        """Create a config with all default values."""
        return GitterConfig(repo=RepoConfig(), version=VersionConfig())

    @staticmethod
    def from_partial(base: "GitterConfig", data: dict[str, Any]) -> "GitterConfig":
        """Overlay raw config data onto an existing config.

        Only the keys present in ``data`` are replaced; every section is
        re-validated through its dataclass.

        Args:
            base: Config providing the values not present in data.
            data: Parsed TOML data, keyed by section name.

        Returns:
            New GitterConfig with the overrides applied.

        Raises:
            ValueError: If a section is not a table, a key is unknown, or a
                value fails validation.
        """
        sections: dict[str, Any] = {}
        for section in fields(base):
            section_data = data.get(section.name)
            current = getattr(base, section.name)
            if section_data is None:
                sections[section.name] = current
                continue
            if not isinstance(section_data, dict):
                raise ValueError(f"[{section.name}] must be a table")
            known = {f.name for f in fields(current)}
            unknown = set(section_data) - known
            if unknown:
                raise ValueError(
                    f"Unknown key(s) in [{section.name}]: {', '.join(sorted(unknown))}"
                )
            sections[section.name] = replace(current, **section_data)
        return GitterConfig(**sections)
