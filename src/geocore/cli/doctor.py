"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from geocore.adapters.http_client import build_async_client
from geocore.core.config import GeocoreSettings, get_user_env_file, read_user_env_vars, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: GeocoreSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = GeocoreSettings()

    table = Table(title="Geocore Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.base_url:
        table.add_row("Base URL", "OK", settings.base_url)
    else:
        table.add_row("Base URL", "MISSING", "Set GEOCORE_BASE_URL or run `geocore doctor configure`")
    if settings.project_id:
        table.add_row("Project ID", "OK", settings.project_id)
    else:
        table.add_row("Project ID", "MISSING", "Set GEOCORE_PROJECT_ID or run `geocore doctor configure`")

    env_file = get_user_env_file()
    stored = sorted(read_user_env_vars(env_file))
    table.add_row("User config", "OK" if stored else "OPTIONAL", f"{env_file} ({', '.join(stored)})" if stored else str(env_file))
    table.add_row("Default user", "OK", settings.default_user_name)

    # Connectivity (best-effort)
    ok_http = False
    if settings.base_url:
        ok_http, detail_http = asyncio.run(_check_http(settings.base_url, settings))
        table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)
    else:
        table.add_row("HTTP connectivity", "SKIPPED", "No base URL")

    _console.print(table)

    if not (settings.base_url and settings.project_id):
        _console.print(
            "\n[yellow]Note:[/yellow] Login and queries fail with InvalidState until base URL and project ID are set."
        )
        raise typer.Exit(code=1)
    if not ok_http:
        raise typer.Exit(code=1)


@app.command()
def configure(
    base_url: str = typer.Option(None, "--base-url", help="Base URL of the Geocore API."),
    project_id: str = typer.Option(None, "--project-id", help="Geocore project ID (PRO-...)."),
) -> None:
    """Store the Geocore endpoint in the user config .env.

    Missing options are prompted for, so no manual .env editing is needed.
    """

    if base_url is None:
        base_url = typer.prompt("Geocore base URL").strip()
    if project_id is None:
        project_id = typer.prompt("Geocore project ID").strip()

    if not base_url or not project_id:
        raise typer.BadParameter("base_url and project_id are required")

    env_path = write_user_env_vars(
        {
            "GEOCORE_BASE_URL": base_url.rstrip("/"),
            "GEOCORE_PROJECT_ID": project_id,
        }
    )

    _console.print(f"[green]Saved Geocore config to:[/green] {env_path}")
