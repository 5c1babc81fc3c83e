"""CLI interface for sitestage.

Command-line tool for serving and exporting CMS-driven sites.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from sitestage.config import Config
from sitestage.core.errors import SiteError


@click.group()
def cli() -> None:
    """sitestage - CMS content rendered as a site."""


def _config_option(func):
    return click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, path_type=Path),
        default=None,
        help="Path to configuration file (default: auto-discover sitestage.toml)",
    )(func)


def _content_dir_option(func):
    return click.option(
        "--content-dir",
        "-s",
        type=click.Path(exists=True, path_type=Path, file_okay=False),
        default=None,
        help="Content directory (overrides config)",
    )(func)


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)


def _fail(error: Exception) -> NoReturn:
    click.echo(click.style(f"Error: {error}", fg="red"), err=True)
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@_config_option
@_content_dir_option
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
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    content_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
) -> None:
    """Start the development server."""
    from sitestage.server import run_server

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        host=host,
        port=port,
        content_dir=content_dir,
        live_reload_enabled=live_reload,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content directory: {config.content.content_dir}")
    click.echo(f"Default language: {config.content.default_language}")
    if config.cms.url:
        click.echo(f"CMS URL: {config.cms.url}")
    else:
        click.echo("Contact form: disabled (no CMS URL configured)")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    run_server(config)


@cli.command()
@_config_option
@_content_dir_option
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def build(
    config_path: Path | None,
    content_dir: Path | None,
    output_dir: Path | None,
    verbose: bool,
) -> None:
    """Export the site as static HTML."""
    from sitestage.core.builder import StaticSiteBuilder

    _configure_logging(verbose)
    config = _load_config(config_path).with_overrides(
        content_dir=content_dir,
        output_dir=output_dir,
    )

    click.echo(f"Building site from {config.content.content_dir}...")
    try:
        result = StaticSiteBuilder(config).build()
    except SiteError as e:
        _fail(e)

    for slug in result.pages:
        click.echo(f"  -> {slug}")
    click.echo(
        click.style(
            f"\nExported {len(result.pages)} pages to {result.output_dir}",
            fg="green",
            bold=True,
        ),
    )
    click.echo(f"Sitemap entries: {result.sitemap_entries}")


@cli.command()
@_config_option
@_content_dir_option
def sitemap(config_path: Path | None, content_dir: Path | None) -> None:
    """Print the sitemap XML."""
    from sitestage.core.content import FileContentStore
    from sitestage.core.metadata import load_site_metadata
    from sitestage.core.sitemap import generate_sitemap, render_sitemap_xml

    config = _load_config(config_path).with_overrides(content_dir=content_dir)
    locale = config.content.default_language
    accessor = FileContentStore(config.content.content_dir, locale)

    try:
        site_metadata = load_site_metadata(accessor, locale)
    except SiteError as e:
        _fail(e)

    entries = generate_sitemap(accessor, locale, str(site_metadata.get("baseUrl", "")))
    click.echo(render_sitemap_xml(entries), nl=False)


if __name__ == "__main__":
    cli()
