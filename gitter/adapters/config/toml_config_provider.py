"""TOML-based configuration provider.

Loads configuration from .gitter.toml with global config fallback.

Config loading priority (highest to lowest):
1. Environment: GITTER_BACKEND
2. Local: <repo>/.gitter.toml (repo-specific)
3. Global: ~/.config/gitter/config.toml (user defaults)
4. Built-in defaults
"""

import logging
import os
from dataclasses import replace
from pathlib import Path

from gitter.domain.config import GitterConfig
from gitter.shared.config_io import (
    get_global_config_path,
    get_local_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)

BACKEND_ENV_VAR = "GITTER_BACKEND"


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Local values override global values key by key within a section.
    Missing or invalid files are logged and skipped.
    """

    def load(self, repo_root: Path) -> GitterConfig:
        """Load configuration with global fallback.

        Args:
            repo_root: Repository directory that may hold .gitter.toml

        Returns:
            GitterConfig instance with merged values or defaults
        """
        config = GitterConfig.default()

        for label, path in (
            ("global", get_global_config_path()),
            ("local", get_local_config_path(repo_root)),
        ):
            if not path.exists():
                continue
            try:
                config = GitterConfig.from_partial(config, load_config_data(path))
                logger.debug("Loaded %s config from %s", label, path)
            except (FileNotFoundError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to parse %s config at %s: %s. Ignoring it.",
                    label,
                    path,
                    e,
                )

        backend = os.environ.get(BACKEND_ENV_VAR)
        if backend:
            try:
                config = replace(config, repo=replace(config.repo, backend=backend))
            except ValueError as e:
                logger.warning("Ignoring %s: %s", BACKEND_ENV_VAR, e)

        return config
