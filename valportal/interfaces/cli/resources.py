"""Catalog management CLI: inspect and import sitemap resources."""

from __future__ import annotations

import json
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from valportal.infrastructure.db.repositories import ResourceRepository
from valportal.infrastructure.observability import get_logger
from valportal.interfaces.cli.context import (CLIContext, build_cli_context,
                                              portal_service)
from valportal.services.dto import ResourceImportDTO

console = Console()
logger = get_logger(__name__)
DEFAULT_CLI_CONTEXT = build_cli_context()


@click.group()
@click.option(
    "--db",
    "db_path",
    default=None,
    show_default=str(DEFAULT_CLI_CONTEXT.db_path),
    help="Path to the SQLite database.",
)
@click.pass_context
def resources(ctx: click.Context, db_path: str | None) -> None:
    """Inspect and import the resources shown on each portal."""

    ctx.ensure_object(dict)
    ctx.obj["cli_context"] = (
        DEFAULT_CLI_CONTEXT if db_path is None else build_cli_context(db_path)
    )


@resources.command("list")
@click.argument("domain")
@click.pass_context
def list_cmd(ctx: click.Context, domain: str) -> None:
    """List the sitemap resources of DOMAIN grouped as the portal shows them."""

    cli_context: CLIContext = ctx.obj["cli_context"]
    with portal_service(cli_context) as service:
        tabs = service.get_tabs(domain)

    if not tabs:
        console.print(f"[yellow]No sitemap resources for '{domain}'.[/yellow]")
        return

    table = Table(title=f"Resources for {domain}")
    table.add_column("Tab", style="bold")
    table.add_column("Section")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("ID", style="dim")
    for tab in tabs:
        for section in tab.sections:
            for resource in section.resources:
                table.add_row(
                    tab.name,
                    section.name,
                    resource.name,
                    resource.type_label,
                    resource.id,
                )
    console.print(table)


@resources.command("import")
@click.argument("domain")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--prune/--no-prune",
    default=True,
    show_default=True,
    help="Remove resources of DOMAIN that are not in SOURCE.",
)
@click.pass_context
def import_cmd(ctx: click.Context, domain: str, source: Path, prune: bool) -> None:
    """Import the resources of DOMAIN from a JSON list in SOURCE.

    Entries that are not tagged for the sitemap (no ``sitemap_group1`` or
    ``include_sitemap`` false) are skipped.
    """

    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
    except ValueError as exc:
        console.print(f"[red]Could not parse {source}: {exc}[/red]")
        ctx.exit(1)
    if not isinstance(raw, list):
        console.print(f"[red]Expected a JSON list of resources in {source.name}.[/red]")
        ctx.exit(1)

    records = []
    skipped = 0
    for index, item in enumerate(raw):
        try:
            entry = ResourceImportDTO.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping entry %d of %s: %s", index, source, exc)
            skipped += 1
            continue
        if not entry.is_publishable:
            skipped += 1
            continue
        records.append(entry.to_record())

    cli_context: CLIContext = ctx.obj["cli_context"]
    with cli_context.repository(ResourceRepository) as repository:
        removed = (
            repository.delete_missing(domain, [r["resource_id"] for r in records])
            if prune
            else 0
        )
        imported = repository.upsert_many(domain, records)

    console.print(
        f"[green]Imported {imported} resource(s) for [bold]{domain}[/bold][/green]"
        f" (skipped {skipped}, removed {removed})"
    )
