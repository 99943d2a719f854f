"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of GitterConfig to/from TOML format.
"""

import os
import platform
import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from gitter.domain.config import GitterConfig

LOCAL_CONFIG_NAME = ".gitter.toml"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/gitter/config.toml or ~/.config/gitter/config.toml
    - Windows: %APPDATA%/gitter/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "gitter" / "config.toml"
        return Path.home() / ".config" / "gitter" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "gitter" / "config.toml"
        return Path.home() / ".config" / "gitter" / "config.toml"


def get_local_config_path(repo_root: Path) -> Path:
    """Get the path to a repository's config file (may not exist)."""
    return repo_root / LOCAL_CONFIG_NAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: GitterConfig) -> dict[str, Any]:
    """Convert a GitterConfig to a TOML-serializable dictionary."""
    return {
        "repo": {
            "backend": config.repo.backend,
            "status_format": config.repo.status_format,
        },
        "version": {
            "mode": config.version.mode,
            "marker_file": config.version.marker_file,
        },
    }


def load_config(path: Path) -> GitterConfig:
    """Load configuration from a TOML file on top of the defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed or has invalid values
    """
    return GitterConfig.from_partial(GitterConfig.default(), load_config_data(path))


def save_config(config: GitterConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: GitterConfig to save
        path: Destination path
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
