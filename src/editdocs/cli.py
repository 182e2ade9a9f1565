"""CLI interface for editdocs.

Command-line tool for serving a Markdown tree and managing editor users.
"""

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from editdocs.config import Config, ConfigError
from editdocs.core.credentials import CredentialStore


@click.group()
def cli() -> None:
    """editdocs - Markdown documents with an inline editor."""


def _path_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by commands that locate the document tree."""
    options = [
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, path_type=Path, dir_okay=False),
            default=None,
            help="Path to configuration file (default: auto-discover editdocs.toml)",
        ),
        click.option(
            "--home",
            type=click.Path(path_type=Path, file_okay=False),
            default=None,
            help="Home directory the other paths are relative to (overrides config)",
        ),
        click.option(
            "--docs",
            "docs_dir",
            type=click.Path(path_type=Path),
            default=None,
            help="Documents subdirectory (overrides config)",
        ),
        click.option(
            "--editor",
            "editor_dir",
            type=click.Path(path_type=Path),
            default=None,
            help="Editor subdirectory (overrides config, default: bundled editor)",
        ),
        click.option(
            "--users",
            "users_file",
            type=click.Path(path_type=Path, dir_okay=False),
            default=None,
            help="Users file (overrides config)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(config_path: Path | None, **overrides: Any) -> Config:
    try:
        return Config.load(config_path).with_overrides(**overrides)
    except (OSError, ValueError) as e:
        _fail(str(e))


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


@cli.command()
@_path_options
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--extensions",
    default=None,
    help='Comma-separated editable extensions, e.g. "md,html" (overrides config)',
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    home: Path | None,
    docs_dir: Path | None,
    editor_dir: Path | None,
    users_file: Path | None,
    host: str | None,
    port: int | None,
    extensions: str | None,
    verbose: bool,
) -> None:
    """Start the document server."""
    from editdocs.server import run_server

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = _load_config(
        config_path,
        host=host,
        port=port,
        home=home,
        docs_dir=docs_dir,
        editor_dir=editor_dir,
        users_file=users_file,
        extensions=extensions,
    )
    try:
        config.validate()
        credentials = CredentialStore.load(config.docs.users_path)
    except (ConfigError, ValueError, OSError) as e:
        _fail(str(e))

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Document root: {config.docs.docs_root}")
    click.echo(f"Editor directory: {config.docs.editor_root}")
    click.echo(f"Users: {len(credentials)} loaded from {config.docs.users_path}")
    if config.docs.editable_extensions:
        click.echo(f"Editable: {', '.join(sorted(config.docs.editable_extensions))}")
    else:
        click.echo("Editable: any extension")

    run_server(config, credentials)


@cli.command()
@_path_options
@click.option("--username", prompt=True, help="User to add or overwrite")
@click.password_option(help="Password (prompted without echo when omitted)")
def adduser(
    config_path: Path | None,
    home: Path | None,
    docs_dir: Path | None,
    editor_dir: Path | None,
    users_file: Path | None,
    username: str,
    password: str,
) -> None:
    """Add a user to the users file, replacing any existing password."""
    config = _load_config(
        config_path,
        home=home,
        docs_dir=docs_dir,
        editor_dir=editor_dir,
        users_file=users_file,
    )
    users_path = config.docs.users_path

    try:
        credentials = CredentialStore.load(users_path)
        replaced = username in credentials
        credentials.add_user(username, password)
        credentials.save(users_path)
    except (OSError, ValueError) as e:
        _fail(str(e))

    action = "Updated" if replaced else "Added"
    click.echo(click.style(f"{action} user {username} in {users_path}", fg="green"))


if __name__ == "__main__":
    cli()
