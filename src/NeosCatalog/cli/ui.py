"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path

import click
from dotenv import load_dotenv

from NeosCatalog.cli.runner import CommandRunner
from NeosCatalog.config import load_config_with_defaults
from NeosCatalog.config.app import DEFAULT_CONFIG_PATH
from NeosCatalog.core.query import SearchRequest


@click.group(help="NeosCatalog: query the library catalog index from the terminal.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file, merged over the defaults.",
)
@click.option(
    "--defaults",
    "default_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to the default YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path, default_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()

    try:
        cfg = load_config_with_defaults(config_path, default_path=default_path)
    except (TypeError, ValueError) as error:
        raise click.ClickException(f"Invalid configuration: {error}") from error
    ctx.obj = CommandRunner(cfg)


@cli.command("search")
@click.argument("query", required=False, default="")
@click.option("--field", "search_field", default=None, help="Search field key (e.g. title, author).")
@click.option("--sort", default=None, help="Sort label (e.g. relevance, year).")
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--per-page", type=click.IntRange(min=1), default=None)
@click.option(
    "--filter",
    "filters",
    multiple=True,
    metavar="FIELD=VALUE",
    help="Facet filter; repeatable.",
)
@click.option("--lib", "brand_hint", default=None, help="Library brand id.")
@click.pass_context
def search_cmd(
    ctx: click.Context,
    query: str,
    search_field: str | None,
    sort: str | None,
    page: int,
    per_page: int | None,
    filters: tuple[str, ...],
    brand_hint: str | None,
) -> None:
    """Search the catalog and print the result page as JSON."""
    request = SearchRequest(
        query=query,
        search_field=search_field,
        filters=_parse_filters(filters),
        sort=sort,
        page=page,
        per_page=per_page,
    )
    ctx.obj.run_search(ctx.command.name, request, brand_hint=brand_hint)


@cli.command("show")
@click.argument("record_id")
@click.option("--lib", "brand_hint", default=None, help="Library brand id.")
@click.pass_context
def show_cmd(ctx: click.Context, record_id: str, brand_hint: str | None) -> None:
    """Print one enriched record as JSON."""
    ctx.obj.run_show(ctx.command.name, record_id, brand_hint=brand_hint)


@cli.command("check-config")
@click.pass_context
def check_config_cmd(ctx: click.Context) -> None:
    """Validate the configuration and print a summary."""
    ctx.obj.run_check_config(ctx.command.name)


def _parse_filters(values: tuple[str, ...]) -> dict[str, list[str]]:
    filters: dict[str, list[str]] = {}
    for value in values:
        field, sep, term = value.partition("=")
        if not sep or not field.strip() or not term.strip():
            raise click.BadParameter(f"expected FIELD=VALUE, got {value!r}", param_hint="--filter")
        filters.setdefault(field.strip(), []).append(term.strip())
    return filters
