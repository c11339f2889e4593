"""Command-line interface for staticdomains.

This module defines the CLI commands using Click framework.

Commands:
- rewrite: Rewrite asset URLs in an HTML file to static domains.
- base: Show the domain and base path resolved for an HTML file.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .base_path import resolve_base_path
from .cdn import CDN
from .config import CONFIG_FILENAME, InvalidConfigurationError, RewriteConfig, load_config


@click.group()
@click.version_option(version=__version__, prog_name="staticdomains")
def cli():
    """Move asset URLs in HTML onto static domains."""


def _request_options(func):
    """Options describing the request a page was served for."""
    func = click.option(
        "--scheme",
        type=click.Choice(["http", "https"]),
        default="http",
        show_default=True,
        help="Scheme of the page domain",
    )(func)
    func = click.option(
        "--path",
        "request_path",
        default="/",
        show_default=True,
        help="Request path of the page",
    )(func)
    func = click.option("--host", required=True, help="Host the page is served on")(func)
    return func


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@_request_options
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=False,
    help=f"YAML configuration file (default: ./{CONFIG_FILENAME})",
)
@click.option("--max-domains", type=int, required=False, help="Number of numbered static domains")
@click.option(
    "--file-type",
    "file_types",
    multiple=True,
    metavar="EXT=LABEL",
    help="Send an extension to a fixed subdomain",
)
@click.option(
    "--round-robin",
    "round_robin",
    multiple=True,
    metavar="EXT",
    help="Spread an extension over the numbered domains",
)
@click.option("--remove", "removed", multiple=True, metavar="EXT", help="Stop rewriting an extension")
@click.option(
    "--output",
    "-o",
    type=click.File("w", encoding="utf-8"),
    default="-",
    help="Write the result here instead of stdout",
)
def rewrite(
    source,
    host: str,
    request_path: str,
    scheme: str,
    config_path: Path | None,
    max_domains: int | None,
    file_types: tuple[str, ...],
    round_robin: tuple[str, ...],
    removed: tuple[str, ...],
    output,
):
    """Rewrite asset URLs in SOURCE (use - for stdin)."""
    try:
        config = _build_config(config_path, max_domains, file_types, round_robin, removed)
    except InvalidConfigurationError as exc:
        raise click.ClickException(str(exc)) from None

    html = source.read()
    output.write(CDN(config).apply(html, host, request_path, scheme=scheme))


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@_request_options
def base(source, host: str, request_path: str, scheme: str):
    """Show the domain and base path resolved for SOURCE."""
    resolved = resolve_base_path(host, request_path, source.read(), scheme=scheme)
    click.echo(f"domain: {resolved.domain}")
    click.echo(f"base path: {resolved.base_path}")


def _build_config(
    config_path: Path | None,
    max_domains: int | None,
    file_types: tuple[str, ...],
    round_robin: tuple[str, ...],
    removed: tuple[str, ...],
) -> RewriteConfig:
    """Load the configuration file and apply command-line overrides."""
    config = load_config(config_path or Path.cwd() / CONFIG_FILENAME)
    if max_domains is not None:
        config.set_max_static_domains(max_domains)
    for item in file_types:
        extension, _, label = item.partition("=")
        if not extension or not label:
            raise click.BadParameter(
                f"expected EXT=LABEL, got {item!r}", param_hint="--file-type"
            )
        config.add_file_type(extension, label)
    if round_robin:
        config.add_file_type(round_robin)
    if removed:
        config.remove_file_type(removed)
    return config


def main():
    """Entry point for the CLI application."""
    cli()
