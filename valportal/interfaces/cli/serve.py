"""Run the portal web app with uvicorn."""

from __future__ import annotations

import click
import uvicorn


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", default=8000, type=int, show_default=True, help="Bind port.")
@click.option("--reload", is_flag=True, help="Reload on code changes (development).")
def serve(host: str, port: int, reload: bool) -> None:
    """Serve the portal (``valportal.app.api:app``)."""

    uvicorn.run("valportal.app.api:app", host=host, port=port, reload=reload)
