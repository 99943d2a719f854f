"""Gitter CLI entrypoint.

Command-line interface for repository status and version derivation.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import tomli_w

if TYPE_CHECKING:
    from gitter.adapters.git_cmd.git_adapter import RunnerGitRepo
    from gitter.adapters.gitpython.gitpython_adapter import GitPythonRepo

from gitter.core.errors import GitterCliError, not_a_repository_error
from gitter.core.versioning import FindVersionMode, VersionRequest, VersionService
from gitter.domain.config import GitterConfig
from gitter.domain.exceptions import GitterDomainError
from gitter.shared.config_io import (
    config_to_data,
    get_global_config_path,
    get_local_config_path,
    save_config,
)
from gitter.version import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    GitterCliError exceptions are re-raised to use their built-in
    formatting; domain errors, ValueError and RuntimeError are converted to
    GitterCliError.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except GitterCliError:
                raise
            except GitterDomainError as e:
                raise GitterCliError(e.message, hint=e.hint) from e
            except ValueError as e:
                raise GitterCliError(str(e)) from e
            except RuntimeError as e:
                raise GitterCliError(
                    str(e),
                    hint="Run with --verbose for more details",
                ) from e
            except OSError as e:
                raise GitterCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _load_config(repo_dir: Path) -> GitterConfig:
    """Load configuration for the given repository directory."""
    from gitter.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load(repo_dir)


def _create_repo(
    ctx: click.Context, require_repo: bool = True
) -> RunnerGitRepo | GitPythonRepo:
    """Create the configured backend for the command's repository directory.

    Args:
        ctx: Click context holding repo_dir and config.
        require_repo: Fail with a hint if the directory is not a repository.
    """
    from gitter.adapters.factory import GitterFactory

    repo_dir: Path = ctx.obj["repo_dir"]
    repo = GitterFactory(ctx.obj["config"]).create(repo_dir)
    if require_repo and not repo.is_repository():
        not_a_repository_error(repo_dir)
    return repo


@click.group()
@click.version_option(version=__version__, prog_name="gitter")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging.",
)
@click.option(
    "-C",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Run as if started in this directory.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, directory: Path) -> None:
    """Gitter - git status decoding and commit-depth versioning."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    ctx.ensure_object(dict)
    repo_dir = directory.resolve()
    ctx.obj["verbose"] = verbose
    ctx.obj["repo_dir"] = repo_dir
    ctx.obj["config"] = _load_config(repo_dir)


@cli.command()
@click.option("--bare", is_flag=True, help="Create a bare repository.")
@click.pass_context
@handle_cli_errors("init")
def init(ctx: click.Context, bare: bool) -> None:
    """Create an empty repository."""
    repo = _create_repo(ctx, require_repo=False)
    repo.init(bare=bare)
    click.echo(f"Initialized {'bare ' if bare else ''}repository in {repo.working_dir}")


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.pass_context
@handle_cli_errors("add")
def add(ctx: click.Context, paths: tuple[str, ...]) -> None:
    """Stage PATHS for the next commit."""
    _create_repo(ctx).add(list(paths))


@cli.command()
@click.option("--message", "-m", required=True, help="Commit message.")
@click.option(
    "--all",
    "-a",
    "commit_all",
    is_flag=True,
    help="Stage modified and deleted tracked files first.",
)
@click.pass_context
@handle_cli_errors("commit")
def commit(ctx: click.Context, message: str, commit_all: bool) -> None:
    """Record staged changes."""
    _create_repo(ctx).commit(message, all=commit_all)


@cli.command()
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context) -> None:
    """Show changed paths in short format."""
    result = _create_repo(ctx).status()
    if result.is_clean():
        click.echo("Working tree clean")
        return
    click.echo(str(result))


@cli.command()
@click.option(
    "--mode",
    type=click.Choice([m.value for m in FindVersionMode]),
    default=None,
    help="Marker file convention (default: from config).",
)
@click.option(
    "--file",
    "marker_file",
    default=None,
    help="Marker file path relative to the repository root.",
)
@click.pass_context
@handle_cli_errors("version")
def version(ctx: click.Context, mode: str | None, marker_file: str | None) -> None:
    """Print <base>.<depth> derived from the marker file's history."""
    config: GitterConfig = ctx.obj["config"]
    request = VersionRequest(
        mode=mode or config.version.mode,
        marker_file=marker_file or config.version.marker_file or None,
    )
    response = VersionService(_create_repo(ctx)).execute(request)
    if not response.success:
        raise GitterCliError(response.error or "Version derivation failed", hint=response.hint)
    click.echo(response.version)


@cli.group(name="config")
def config_group() -> None:
    """Show or create configuration files."""


@config_group.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show config file locations and the effective configuration."""
    global_path = get_global_config_path()
    local_path = get_local_config_path(ctx.obj["repo_dir"])
    for label, path in (("Global config", global_path), ("Local config", local_path)):
        state = "exists" if path.exists() else "not created"
        click.echo(f"{label}: {path} ({state})")
    click.echo()
    click.echo(tomli_w.dumps(config_to_data(ctx.obj["config"])).rstrip())


@config_group.command(name="init")
@click.option("--global", "use_global", is_flag=True, help="Write the global config.")
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, use_global: bool, force: bool) -> None:
    """Write a config file with default values."""
    path = get_global_config_path() if use_global else get_local_config_path(ctx.obj["repo_dir"])
    if path.exists() and not force:
        raise GitterCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )
    save_config(GitterConfig.default(), path)
    click.echo(f"Wrote {path}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
