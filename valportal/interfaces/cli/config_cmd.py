"""Inspect and change the stored tab and section order of a portal."""

from __future__ import annotations

import json
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console

from valportal.infrastructure.db.repositories import PortalConfigRepository
from valportal.interfaces.cli.context import (CLIContext, build_cli_context,
                                              portal_service)
from valportal.services.dto import PortalConfigDTO

console = Console()
DEFAULT_CLI_CONTEXT = build_cli_context()


@click.group("config")
@click.option(
    "--db",
    "db_path",
    default=None,
    show_default=str(DEFAULT_CLI_CONTEXT.db_path),
    help="Path to the SQLite database.",
)
@click.pass_context
def config(ctx: click.Context, db_path: str | None) -> None:
    """Manage per-portal ordering overrides."""

    ctx.ensure_object(dict)
    ctx.obj["cli_context"] = (
        DEFAULT_CLI_CONTEXT if db_path is None else build_cli_context(db_path)
    )


@config.command("show")
@click.argument("domain")
@click.pass_context
def show_cmd(ctx: click.Context, domain: str) -> None:
    """Print the stored ordering of DOMAIN as JSON."""

    cli_context: CLIContext = ctx.obj["cli_context"]
    with portal_service(cli_context) as service:
        current = service.get_portal_config(domain)

    payload = PortalConfigDTO.from_domain(current).model_dump(by_alias=True)
    click.echo(json.dumps(payload, indent=2))


@config.command("set")
@click.argument("domain")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def set_cmd(ctx: click.Context, domain: str, source: Path) -> None:
    """Store the ordering of DOMAIN from SOURCE.

    SOURCE is a JSON object with ``tabOrder`` and ``sectionOrder``, the same
    shape the admin mode saves.
    """

    try:
        payload = PortalConfigDTO.model_validate_json(source.read_text(encoding="utf-8"))
    except ValidationError as exc:
        console.print(f"[red]Invalid portal config in {source}:[/red]\n{exc}")
        ctx.exit(1)

    cli_context: CLIContext = ctx.obj["cli_context"]
    with portal_service(cli_context) as service:
        saved = service.save_portal_config(domain, payload.to_domain())

    if not saved:
        console.print(f"[red]Failed to save portal config for '{domain}'.[/red]")
        ctx.exit(1)
    console.print(f"[green]Saved portal config for [bold]{domain}[/bold][/green]")


@config.command("clear")
@click.argument("domain")
@click.pass_context
def clear_cmd(ctx: click.Context, domain: str) -> None:
    """Remove the stored ordering of DOMAIN (back to alphabetical)."""

    cli_context: CLIContext = ctx.obj["cli_context"]
    with cli_context.repository(PortalConfigRepository) as repository:
        repository.delete(domain)
    console.print(f"[green]Cleared portal config for [bold]{domain}[/bold][/green]")
