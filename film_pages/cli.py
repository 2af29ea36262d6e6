"""CLI entry point for building and previewing the site."""

import asyncio
import logging
import shutil
import sys
from pathlib import Path

import click

from .config import load_config
from .constants.config import DEFAULT_HOST, DEFAULT_PORT
from .errors import FilmPagesError, QueryFailure


def _fail(error: FilmPagesError) -> None:
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, QueryFailure):
        for descriptor in error.errors:
            click.echo(f"  - {descriptor.get('message', descriptor)}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Film Pages - build static pages for every Star Wars film."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command("build")
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to write the site to (default: public)"
)
@click.option(
    "--clean",
    is_flag=True,
    help="Delete the output directory before building"
)
def build(output: Path | None, clean: bool):
    """Fetch film data and render every page.

    Reads PIXABAY_API_KEY and the other source options from the
    environment or a .env file.

    Examples:

        filmpages build

        filmpages build --output dist --clean
    """
    from .render import build_site

    config = load_config(output_dir=output)

    if clean and config.output_dir.exists():
        click.echo(f"Removing {config.output_dir}...")
        shutil.rmtree(config.output_dir)

    click.echo(f"Building site into {config.output_dir}...")
    try:
        report = asyncio.run(build_site(config))
    except FilmPagesError as e:
        _fail(e)

    for path in report.pages_written:
        click.echo(f"  {path}")
    click.echo(f"\nBuilt {len(report.pages_written)} pages successfully")


@cli.command("pages")
def pages():
    """List the pages a build would create, without rendering them.

    Examples:

        filmpages pages
    """
    from .render import list_pages

    config = load_config()
    try:
        descriptors = asyncio.run(list_pages(config))
    except FilmPagesError as e:
        _fail(e)

    for page in descriptors:
        context = ", ".join(f"{key}={value!r}" for key, value in page.context.items())
        click.echo(f"{page.path}\t{page.component.name}\t{context}")
    click.echo(f"\n{len(descriptors)} pages")


@cli.command("clean")
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to delete (default: public)"
)
def clean(output: Path | None):
    """Delete the build output directory."""
    config = load_config(output_dir=output)
    if config.output_dir.exists():
        shutil.rmtree(config.output_dir)
        click.echo(f"Removed {config.output_dir}")
    else:
        click.echo(f"Nothing to remove at {config.output_dir}")


@cli.command("serve")
@click.option(
    "--port",
    default=DEFAULT_PORT,
    type=int,
    help=f"Port to run the server on (default: {DEFAULT_PORT})"
)
@click.option(
    "--host",
    default=DEFAULT_HOST,
    help=f"Host to bind to (default: {DEFAULT_HOST})"
)
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Built site directory to serve (default: public)"
)
def serve(port: int, host: str, output: Path | None):
    """Preview the built site.

    Examples:

        filmpages serve

        filmpages serve --port 8080
    """
    from .server import run_server

    config = load_config(output_dir=output)
    if not config.output_dir.exists():
        click.echo(f"Error: {config.output_dir} does not exist. Run 'filmpages build' first.", err=True)
        sys.exit(1)
    run_server(output_dir=config.output_dir, host=host, port=port)
