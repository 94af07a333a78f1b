from __future__ import annotations
import logging
from typing import Annotated
import httpx
import typer
from github_storage.domain.entities import Directory
from github_storage.infrastructure.config import Settings, get_settings
from github_storage.infrastructure.github_contents_client import GitHubContentsClient
from github_storage.services.github_adapter import GitHubAdapter

app = typer.Typer(
    name="github-storage-ls",
    help="List the contents of a GitHub repository branch.",
    add_completion=False,
)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )


def create_adapter(settings: Settings | None = None) -> tuple[GitHubAdapter, httpx.Client]:
    """Wire settings → HTTP client → repository client → adapter.

    The caller owns the returned ``httpx.Client`` and must close it.
    """
    settings = settings or get_settings()
    http_client = httpx.Client(timeout=httpx.Timeout(settings.http_timeout))
    client = GitHubContentsClient(settings.client_config(), http_client)
    return GitHubAdapter(client, prefix=settings.path_prefix), http_client


@app.command()
def ls(
    directory: Annotated[
        str, typer.Argument(help="Directory to list, relative to the path prefix")
    ] = "",
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="List every descendant")
    ] = False,
) -> None:
    """List a repository directory, directories marked with a trailing slash."""
    settings = get_settings()
    configure_logging(settings)
    adapter, http_client = create_adapter(settings)
    with http_client:
        entries = adapter.list_contents(directory, recursive=recursive)
    if adapter.last_error is not None:
        typer.echo(f"error: {adapter.last_error}", err=True)
        raise typer.Exit(code=1)
    for entry in entries:
        suffix = "/" if isinstance(entry, Directory) else ""
        typer.echo(f"{entry.path}{suffix}")


def main() -> None:
    """Start the ``github-storage-ls`` command."""
    app()


if __name__ == "__main__":
    main()
