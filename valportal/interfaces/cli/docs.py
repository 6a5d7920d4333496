"""Documentation CLI: list and publish portal docs and guides."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from valportal.domain.models import DocType
from valportal.infrastructure.db.repositories import DocRepository
from valportal.interfaces.cli.context import (CLIContext, build_cli_context,
                                              portal_service)
from valportal.services.dto import DocImportDTO

console = Console()
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
def docs(ctx: click.Context, db_path: str | None) -> None:
    """Manage documentation shown next to the resources."""

    ctx.ensure_object(dict)
    ctx.obj["cli_context"] = (
        DEFAULT_CLI_CONTEXT if db_path is None else build_cli_context(db_path)
    )


@docs.command("list")
@click.argument("domain")
@click.pass_context
def list_cmd(ctx: click.Context, domain: str) -> None:
    """List the documentation of DOMAIN and the shared guides."""

    cli_context: CLIContext = ctx.obj["cli_context"]
    with portal_service(cli_context) as service:
        domain_docs = service.get_domain_docs(domain)
        guides = service.get_general_docs()

    if not domain_docs and not guides:
        console.print("[yellow]No documentation published.[/yellow]")
        return

    table = Table(title=f"Documentation for {domain}")
    table.add_column("Kind", style="bold")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("ID", style="dim")
    for doc in domain_docs:
        table.add_row("Documentation", doc.category or "", doc.title, doc.id)
    for doc in guides:
        table.add_row("Guide", doc.category or "", doc.title, doc.id)
    console.print(table)


@docs.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_cmd(ctx: click.Context, source: Path) -> None:
    """Publish the docs listed in SOURCE (a JSON list)."""

    try:
        raw = json.loads(source.read_text(encoding="utf-8"))
        entries = [DocImportDTO.model_validate(item) for item in raw]
    except (ValueError, TypeError) as exc:
        # pydantic's ValidationError is a ValueError
        console.print(f"[red]Could not import {source}: {exc}[/red]")
        ctx.exit(1)

    missing_domain = [e.id for e in entries if e.doc_type is DocType.DOMAIN and not e.domain]
    if missing_domain:
        console.print(
            f"[red]Domain docs need a domain: {', '.join(missing_domain)}[/red]"
        )
        ctx.exit(1)

    cli_context: CLIContext = ctx.obj["cli_context"]
    with cli_context.repository(DocRepository) as repository:
        for entry in entries:
            repository.upsert(
                doc_id=entry.id,
                doc_type=entry.doc_type.value,
                title=entry.title,
                content=entry.content,
                domain=entry.domain,
                summary=entry.summary,
                category=entry.category,
                sort_order=entry.sort_order,
            )
    console.print(f"[green]Published {len(entries)} doc(s)[/green]")
